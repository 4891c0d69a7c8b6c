"""Module containing the Bitcoin transaction representation and utilities.

The following components are included:
    - WITNESS_SCALE_FACTOR (constant): how many weight units a non witness byte
        is worth.
    - TxOutput (class): an output created by the transaction.
    - TxDescriptor (class): the channel funding transaction representation
        used to predict its size.
    - estimate_vsize (function): the virtual size of the funding transaction
        spending the selected UTxOs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

import structlog

from datatypes.utxo import UTxO
from utils.bitcoin import get_var_int_size
from utils.script import FUNDING_SCRIPT, p2tr_script, p2wsh_script

LOGGER = structlog.stdlib.get_logger(__name__)

WITNESS_SCALE_FACTOR: int = 4


@dataclass(frozen=True)
class TxOutput:
    """An output of the transaction.

    Attributes:
        amount: the satoshis sent to the output.
        script: the scriptPubKey locking the output.
    """

    VALUE_SIZE: ClassVar[int] = 8

    amount: int
    script: bytes

    @property
    def size(self) -> int:
        """Serialized size: value, script length and script."""
        return (
            self.VALUE_SIZE + get_var_int_size(len(self.script)) + len(self.script)
        )


#: the P2WSH output opening the channel
FUNDING_OUTPUT_SCRIPT: bytes = p2wsh_script(FUNDING_SCRIPT)

#: the change output, a P2TR output as the wallet defaults to
CHANGE_OUTPUT_SCRIPT: bytes = p2tr_script()


@dataclass(frozen=True)
class TxDescriptor:
    """Dataclass describing the channel funding transaction to be sized.

    The transaction is never signed nor broadcast. Its inputs are sized as a
    maximum-size default-signature spend of each selected UTxO, and it has
    exactly two outputs: the channel funding output and the change output.

    Weight follows the segregated witness rules: every non witness byte counts
    four weight units and every witness byte counts one. Virtual size is the
    weight divided by four, rounded up.

    Attributes:
        TX_VERSION_SIZE: the size in bytes of the transaction version field.
        TX_MARKER_SIZE: the size in bytes of the segwit marker field.
        TX_FLAG_SIZE: the size in bytes of the witness flag field, used to
            signal the inclusion of witness data as part of a transaction.
        TX_LOCKTIME_SIZE: the size in bytes of the locktime field.

        inputs: the UTxOs spent by the transaction, in selection order.
        funding: the channel funding output.
        change: the output returning the leftover amount to the wallet.
    """

    TX_VERSION_SIZE: ClassVar[int] = 4
    TX_MARKER_SIZE: ClassVar[int] = 1
    TX_FLAG_SIZE: ClassVar[int] = 1
    TX_LOCKTIME_SIZE: ClassVar[int] = 4

    inputs: tuple[UTxO, ...]
    funding: TxOutput
    change: TxOutput

    @classmethod
    def channel_funding(
        cls, inputs: Iterable[UTxO], amount: int, change: int = 0
    ) -> TxDescriptor:
        """Build the funding transaction for a channel of the given amount.

        Args:
            inputs: the UTxOs funding the channel.
            amount: the channel capacity in satoshis.
            change: the amount returned to the wallet.
        """
        return cls(
            inputs=tuple(inputs),
            funding=TxOutput(amount=amount, script=FUNDING_OUTPUT_SCRIPT),
            change=TxOutput(amount=change, script=CHANGE_OUTPUT_SCRIPT),
        )

    @property
    def outputs(self) -> tuple[TxOutput, TxOutput]:
        return (self.funding, self.change)

    @property
    def input_amount(self) -> int:
        """The sum of all the input amounts."""
        return sum(utxo.amount for utxo in self.inputs)

    @property
    def base_size(self) -> int:
        """Size in bytes of the transaction without witness data."""
        header_size: int = (
            self.TX_VERSION_SIZE
            + self.TX_LOCKTIME_SIZE
            + get_var_int_size(len(self.inputs))
            + get_var_int_size(len(self.outputs))
        )
        input_vector_size: int = sum(
            utxo.output_type.value.input_size for utxo in self.inputs
        )
        output_vector_size: int = sum(output.size for output in self.outputs)
        return header_size + input_vector_size + output_vector_size

    @property
    def witness_size(self) -> int:
        """Size in bytes of the marker, flag and the witness of each input."""
        # marker and flag are present even without inputs
        segwit_header_size: int = self.TX_MARKER_SIZE + self.TX_FLAG_SIZE
        return segwit_header_size + sum(
            utxo.output_type.value.witness_size for utxo in self.inputs
        )

    @property
    def weight(self) -> int:
        """The weight of the transaction expressed in weight units."""
        return self.base_size * WITNESS_SCALE_FACTOR + self.witness_size

    @property
    def vsize(self) -> int:
        """The virtual size of the transaction, rounded up."""
        return -(-self.weight // WITNESS_SCALE_FACTOR)

    @property
    def digest(self) -> dict:
        """The transaction summary."""
        return {
            "#inputs": len(self.inputs),
            "input_amount": self.input_amount,
            "funding": self.funding.amount,
            "change": self.change.amount,
            "weight": self.weight,
            "vsize": self.vsize,
        }


def estimate_vsize(inputs: Iterable[UTxO], amount: int, change: int = 0) -> int:
    """Predict the virtual size of the funding transaction spending inputs.

    Args:
        inputs: the selected UTxOs.
        amount: the channel capacity in satoshis.
        change: the amount returned to the wallet.

    Returns:
        The virtual size in vbytes, rounded up.
    """
    tx = TxDescriptor.channel_funding(inputs, amount=amount, change=change)
    LOGGER.debug("Funding transaction sized", **tx.digest)
    return tx.vsize
