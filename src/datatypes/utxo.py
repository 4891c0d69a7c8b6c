"""A module with the needed data to create a simplified UTxO model.

This module includes:
    - TypeMetadata (class): sizing data associated with the OutputType.
    - OutputType (class): the spending condition of the UTxO.
    - OutPoint (class): the reference to the transaction output being spent.
    - UTxO (class): a simplified Unspent Transaction Output model.
    - LND_TAPROOT_PUBKEY (constant): the wallet address type code of taproot
        outputs.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, NamedTuple

import structlog

from errors import InvalidUTxORecord
from utils.bitcoin import get_var_int_size
from utils.script import p2tr_script, p2wpkh_script

LOGGER = structlog.stdlib.get_logger(__name__)

#: LND AddressType codes, as reported by ListUnspent
LND_ADDRESS_TYPES: dict[str, int] = {
    "WITNESS_PUBKEY_HASH": 0,
    "NESTED_PUBKEY_HASH": 1,
    "UNUSED_WITNESS_PUBKEY_HASH": 2,
    "UNUSED_NESTED_PUBKEY_HASH": 3,
    "TAPROOT_PUBKEY": 4,
    "UNUSED_TAPROOT_PUBKEY": 5,
}
LND_TAPROOT_PUBKEY: int = LND_ADDRESS_TYPES["TAPROOT_PUBKEY"]


class TypeMetadata(NamedTuple):
    """Sizing data of a maximum-size default-signature spend.

    Attributes:
        script_sig_size: the length of the script placed in the input.
        witness_items: the length of every item pushed to the witness stack.
    """

    script_sig_size: int
    witness_items: tuple[int, ...]

    @property
    def input_size(self) -> int:
        """Non witness bytes: outpoint, script length, script and sequence."""
        return (
            OutPoint.SIZE
            + get_var_int_size(self.script_sig_size)
            + self.script_sig_size
            + UTxO.SEQUENCE_SIZE
        )

    @property
    def witness_size(self) -> int:
        """Serialized witness: item count plus every length-prefixed item."""
        return get_var_int_size(len(self.witness_items)) + sum(
            get_var_int_size(item) + item for item in self.witness_items
        )


class OutputType(Enum):
    """Representation of the spending conditions the estimator handles."""

    #: Pay to Taproot, spent through the key path (one schnorr signature)
    TAPROOT_KEY_PATH = TypeMetadata(
        script_sig_size=len(p2tr_script()), witness_items=(142,)
    )
    #: Pay to Witness Public Key Hash (signature plus compressed public key)
    WITNESS_PUBKEY_HASH = TypeMetadata(
        script_sig_size=len(p2wpkh_script()), witness_items=(128, 66)
    )

    @classmethod
    def from_address_type(cls, address_type: int | str) -> OutputType:
        """Map a wallet address type code or name to an OutputType.

        Only taproot outputs are told apart, every other code is sized as a
        P2WPKH spend, which is what the wallet does when funding channels.

        Args:
            address_type: an LND AddressType code or name, or one of the
                short names 'p2tr' and 'p2wpkh'.

        Raises:
            InvalidUTxORecord: if the name is not a known address type.
        """
        if isinstance(address_type, str) and address_type.strip().isdigit():
            address_type = int(address_type)
        if isinstance(address_type, str):
            short_name: str = address_type.strip().lower()
            if short_name == "p2tr":
                return cls.TAPROOT_KEY_PATH
            if short_name == "p2wpkh":
                return cls.WITNESS_PUBKEY_HASH
            try:
                address_type = LND_ADDRESS_TYPES[address_type.strip().upper()]
            except KeyError as e:
                raise InvalidUTxORecord(
                    f"Unknown address type: {address_type!r}"
                ) from e

        if address_type == LND_TAPROOT_PUBKEY:
            return cls.TAPROOT_KEY_PATH
        return cls.WITNESS_PUBKEY_HASH


@dataclass(frozen=True)
class OutPoint:
    """Reference to a previous transaction output.

    Attributes:
        txid: the 32 byte hash of the transaction, in internal byte order.
        vout: the index of the output inside that transaction.
    """

    SIZE: ClassVar[int] = 36

    txid: bytes = bytes(32)
    vout: int = 0

    def __post_init__(self) -> None:
        if len(self.txid) != 32:
            raise ValueError("txid must be 32 bytes long")
        if not 0 <= self.vout <= 0xFFFFFFFF:
            raise ValueError("vout must fit in an unsigned 32 bit integer")

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | None) -> OutPoint:
        """Parse an outpoint record: {'txid_str'|'txid_bytes', 'output_index'}.

        A missing record yields the null outpoint.
        """
        if not record:
            return cls()
        if not isinstance(record, Mapping):
            raise InvalidUTxORecord(f"Invalid outpoint: {record!r}")
        try:
            if record.get("txid_str"):
                # displayed txids are byte reversed
                txid = bytes.fromhex(record["txid_str"])[::-1]
            elif record.get("txid_bytes"):
                txid = bytes.fromhex(record["txid_bytes"])
            else:
                txid = bytes(32)
            return cls(txid=txid, vout=int(record.get("output_index", 0)))
        except (ValueError, TypeError) as e:
            raise InvalidUTxORecord(f"Invalid outpoint: {e}") from e

    def __str__(self) -> str:
        return f"{self.txid[::-1].hex()}:{self.vout}"


@dataclass(frozen=True)
class UTxO:
    """A simplification of an Unspent Transaction Output.

    Attributes:
        output_type: the spending condition of the UTxO.
        amount: the amount of satoshis this UTxO has blocked in it.
        outpoint: where the UTxO was created.
        script: the raw scriptPubKey of the UTxO, if known.
    """

    SEQUENCE_SIZE: ClassVar[int] = 4

    output_type: OutputType
    amount: int
    outpoint: OutPoint = field(default_factory=OutPoint)
    script: bytes = b""

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidUTxORecord("UTxO amounts must be integer satoshis")
        if self.amount < 0:
            raise InvalidUTxORecord("UTxO amounts can't be negative")

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> UTxO:
        """Build a UTxO from a wallet ListUnspent record.

        Args:
            record: a mapping with the keys 'address_type', 'amount_sat',
                'outpoint' and 'pk_script' (hex encoded).

        Raises:
            InvalidUTxORecord: if the record is missing data or is malformed.
        """
        if "amount_sat" not in record:
            raise InvalidUTxORecord("UTxO record without 'amount_sat'")
        amount = record["amount_sat"]
        if isinstance(amount, str) and amount.isdigit():
            amount = int(amount)

        try:
            script: bytes = bytes.fromhex(record.get("pk_script") or "")
        except (ValueError, TypeError) as e:
            raise InvalidUTxORecord(f"Invalid pk_script: {e}") from e

        utxo = cls(
            output_type=OutputType.from_address_type(
                record.get("address_type", 0)
            ),
            amount=amount,
            outpoint=OutPoint.from_record(record.get("outpoint")),
            script=script,
        )
        LOGGER.debug(
            "UTxO loaded",
            outpoint=str(utxo.outpoint),
            amount=utxo.amount,
            type=utxo.output_type.name,
        )
        return utxo
