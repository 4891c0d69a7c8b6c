"""This module contains constants and classes related to bitcoin fee rates.

Includes the following:
    - FeeRate (class): a class to represent Bitcoin fee rates.
    - FeeTier (class): the urgency levels a market fee rate is quoted at.
    - FeeRateSet (class): one fee rate for each one of the fee tiers.
    - ProjectedFee (class): the fee a transaction pays at a given fee rate.
    - ProjectedFees (class): the projected fee for each one of the fee tiers.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

import structlog

LOGGER = structlog.stdlib.get_logger(__name__)


@dataclass(frozen=True)
class FeeRate:
    """Class to represent bitcoin fee rates and compute fees based on it.

    Attributes:
        sats_vB: the fee rate expressed in sats per virtual byte.
    """

    sats_vB: int

    def __post_init__(self) -> None:
        if isinstance(self.sats_vB, bool) or not isinstance(self.sats_vB, int):
            raise ValueError("fee rates must be integer sats per vbyte")
        if self.sats_vB < 0:
            raise ValueError("fee rates can't be negative")

    def __repr__(self) -> str:
        return str(self.sats_vB)

    def fee(self, vsize: int) -> int:
        fee: int = vsize * self.sats_vB
        return fee


class FeeTier(Enum):
    """The fee tiers, valued with the field name used by the fee oracle."""

    FASTEST = "fastestFee"
    HALF_HOUR = "halfHourFee"
    HOUR = "hourFee"
    ECONOMY = "economyFee"
    MINIMUM = "minimumFee"


class FeeRateSet(Mapping[FeeTier, FeeRate]):
    """Read-only mapping holding exactly one FeeRate per FeeTier."""

    def __init__(self, rates: Mapping[FeeTier, FeeRate | int]) -> None:
        missing = [tier.value for tier in FeeTier if tier not in rates]
        if missing:
            raise ValueError(f"Missing fee tiers: {', '.join(missing)}")
        self._rates = MappingProxyType(
            {tier: self._as_fee_rate(rates[tier]) for tier in FeeTier}
        )

    @staticmethod
    def _as_fee_rate(rate: FeeRate | int) -> FeeRate:
        return rate if isinstance(rate, FeeRate) else FeeRate(rate)

    @classmethod
    def uniform(cls, sats_vB: int) -> FeeRateSet:
        """All the tiers set to the same fee rate."""
        rate = FeeRate(sats_vB)
        return cls({tier: rate for tier in FeeTier})

    def __getitem__(self, tier: FeeTier) -> FeeRate:
        return self._rates[tier]

    def __iter__(self) -> Iterator[FeeTier]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        rates = ", ".join(f"{t.value}={r}" for t, r in self._rates.items())
        return f"FeeRateSet({rates})"


class ProjectedFee(NamedTuple):
    """The fee of a transaction at a fee rate.

    Attributes:
        fee: the total fee expressed in satoshis.
        fee_rate: the fee rate used, in sats per virtual byte.
    """

    fee: int
    fee_rate: int


class ProjectedFees(Mapping[FeeTier, ProjectedFee]):
    """Read-only mapping with the ProjectedFee of every FeeTier."""

    def __init__(self, fees: Mapping[FeeTier, ProjectedFee]) -> None:
        missing = [tier.value for tier in FeeTier if tier not in fees]
        if missing:
            raise ValueError(f"Missing fee tiers: {', '.join(missing)}")
        self._fees = MappingProxyType({tier: fees[tier] for tier in FeeTier})

    def __getitem__(self, tier: FeeTier) -> ProjectedFee:
        return self._fees[tier]

    def __iter__(self) -> Iterator[FeeTier]:
        return iter(self._fees)

    def __len__(self) -> int:
        return len(self._fees)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ProjectedFees):
            return dict(self._fees) == dict(other._fees)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._fees.items()))

    def __repr__(self) -> str:
        return f"ProjectedFees({self.as_dict()})"

    def as_dict(self) -> dict[str, list[int]]:
        """The report, keyed by fee oracle field names."""
        return {
            tier.value: [projected.fee, projected.fee_rate]
            for tier, projected in self._fees.items()
        }
