"""Module wiring up coin selection, size estimation and fee projection.

Includes the following:
    - FeeEstimate (class): everything found out while estimating the fee.
    - estimate (function): run the whole fee estimation pipeline.
    - calculate_fee (function): the projected fees of opening a channel.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from datatypes.fee_rate import ProjectedFees
from datatypes.transaction import estimate_vsize
from datatypes.utxo import OutputType, UTxO
from fees.projection import project
from fees.source import FeeRateSource
from selection.context import Selection
from selection.models import select_coins

LOGGER = structlog.stdlib.get_logger(__name__)


@dataclass(frozen=True)
class FeeEstimate:
    """The outcome of a fee estimation.

    Attributes:
        selection: the UTxOs that would fund the channel.
        vsize: the virtual size of the funding transaction.
        fees: the fee to pay at each fee tier.
    """

    selection: Selection
    vsize: int
    fees: ProjectedFees


def estimate(
    utxos: Iterable[UTxO] | None,
    amount: int,
    fee_rate: int | None = None,
    fee_source: FeeRateSource | None = None,
) -> FeeEstimate:
    """Estimate the fee of a channel funding transaction.

    The stages run in order: coin selection, size estimation, fee rate
    resolution and fee projection. Coin selection fails before any request is
    made to the fee oracle.

    Args:
        utxos: the UTxOs the wallet can spend. If None, a single taproot UTxO
            holding exactly `amount` is used.
        amount: the channel capacity in satoshis.
        fee_rate: if set, the fee rate in sats per vbyte to use for every tier
            instead of the fee oracle rates.
        fee_source: where to get the fee rates from. Defaults to mempool.space.

    Raises:
        NotEnoughBitcoin: if the UTxOs can't cover the amount.
        FeeSourceUnavailable: if the fee rates can't be retrieved.
    """
    if amount < 0:
        raise ValueError("the channel amount can't be negative")

    if utxos is None:
        utxos = [UTxO(output_type=OutputType.TAPROOT_KEY_PATH, amount=amount)]

    selection: Selection = select_coins(utxos, amount)
    vsize: int = estimate_vsize(
        selection.inputs, amount=amount, change=selection.change
    )
    fee_rates = (fee_source or FeeRateSource()).resolve(fee_rate)
    fees: ProjectedFees = project(vsize, fee_rates)

    LOGGER.info(
        "Fees projected",
        vsize=vsize,
        **selection.digest,
    )
    return FeeEstimate(selection=selection, vsize=vsize, fees=fees)


def calculate_fee(
    utxos: Iterable[UTxO] | None,
    amount: int,
    fee_rate: int | None = None,
    fee_source: FeeRateSource | None = None,
) -> ProjectedFees:
    """Get the projected fees of a channel funding transaction.

    See `estimate` for the arguments and raised exceptions.
    """
    return estimate(utxos, amount, fee_rate, fee_source).fees
