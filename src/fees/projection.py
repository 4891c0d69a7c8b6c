from __future__ import annotations

from datatypes.fee_rate import FeeRateSet, ProjectedFee, ProjectedFees


def project(vsize: int, fee_rates: FeeRateSet) -> ProjectedFees:
    """Compute the fee of a transaction of vsize vbytes at every fee tier.

    Args:
        vsize: the virtual size of the transaction.
        fee_rates: the fee rate of each one of the fee tiers.

    Returns:
        For each tier, the fee in satoshis together with the fee rate used.
    """
    return ProjectedFees(
        {
            tier: ProjectedFee(fee=fee_rate.fee(vsize), fee_rate=fee_rate.sats_vB)
            for tier, fee_rate in fee_rates.items()
        }
    )
