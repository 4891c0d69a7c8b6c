from __future__ import annotations

from dataclasses import dataclass

import structlog

from datatypes.utxo import UTxO
from errors import FestivusError

LOGGER = structlog.stdlib.get_logger(__name__)


class NotEnoughBitcoin(FestivusError):
    """Raise when the wallet can't cover the requested amount."""

    def __init__(self, target: int = 0, available: int = 0) -> None:
        super().__init__(target, available)
        self.target = target
        self.available = available

    def __str__(self) -> str:
        return "Not enough bitcoin in wallet."


@dataclass(frozen=True)
class Selection:
    """The UTxOs picked to fund a transaction.

    Attributes:
        inputs: the selected UTxOs, in selection order.
        target: the amount the selection had to cover.
        remaining: the target minus the selected amount. Never positive.
    """

    inputs: tuple[UTxO, ...]
    target: int
    remaining: int

    def __post_init__(self) -> None:
        if self.remaining > 0:
            raise NotEnoughBitcoin(self.target, self.target - self.remaining)

    @property
    def amount(self) -> int:
        return sum(utxo.amount for utxo in self.inputs)

    @property
    def change(self) -> int:
        """The leftover amount to return to the wallet."""
        return abs(self.remaining)

    @property
    def digest(self) -> dict:
        return {
            "target": self.target,
            "#inputs": len(self.inputs),
            "selected": self.amount,
            "change": self.change,
        }
