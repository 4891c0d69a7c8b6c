"""A module including a cryptographic-less model of a Bitcoin wallet.

It includes:
    - Wallet (class): the pool of UTxOs available to fund a channel, kept in
        coin selection order.
    - load_utxo_records (function): read UTxO records from a json document.
"""

from __future__ import annotations

import json
from collections.abc import Generator, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from sortedcontainers import SortedDict

from datatypes.utxo import UTxO
from errors import InvalidUTxORecord

LOGGER = structlog.stdlib.get_logger(__name__)


@dataclass
class Wallet:
    """A class to store a collection of UTxOs sorted for selection.

    This class lefts aside any cryptographic consideration about UTxO property.
    The wallet implemented here considers a UTxO as part of its property by
    just including it in its pool. We don't handle private keys here.

    UTxOs are traversed from the greatest to the smallest amount. UTxOs with
    the same amount are traversed in the order they were added.

    Attributes:
        balance: the total amount of bitcoin which the wallet can unlock with
            its keys.
    """

    balance: int = 0

    #: internal counter for the UTxOs that pass through the wallet
    _index: int = 0

    #: the pool of UTxOs, indexed by the negated amount and insertion index
    _utxo_pool: SortedDict = field(default_factory=SortedDict)

    @classmethod
    def from_utxos(cls, utxos: Iterable[UTxO]) -> Wallet:
        """Create a wallet holding the UTxOs, in the order they are given."""
        wallet = cls()
        for utxo in utxos:
            wallet.add(utxo)
        return wallet

    def add(self, utxo: UTxO) -> None:
        """Add a new UTxO to the wallet.

        Args:
            utxo: the new UTxO to include in the wallet.
        """
        self._utxo_pool[(-utxo.amount, self._index)] = utxo
        self._index += 1
        self.balance += utxo.amount

    def __len__(self) -> int:
        """Retrieve the amount of UTxOs currently stored in the wallet.

        Returns:
            The length of the UTxO pool.
        """
        return len(self._utxo_pool)

    def __iter__(self) -> Generator[UTxO, None, None]:
        """Traverse the wallet pool from greatest to smallest bitcoin amount.

        Yields:
            The UTxOs from the one with the greatest bitcoin amount to the one
            with the smallest bitcoin amount, ties in insertion order.
        """
        yield from self._utxo_pool.values()


def load_utxo_records(path: Path) -> list[dict[str, Any]]:
    """Read UTxO records from a json file.

    The file can hold the list of records or the object returned by the
    node, with the records under the 'utxos' key.

    Args:
        path: the location of the json file.

    Raises:
        InvalidUTxORecord: if the document doesn't hold a list of records.
    """
    with path.open(mode="r", encoding="utf-8") as utxos_file:
        try:
            document: Any = json.load(utxos_file)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidUTxORecord(f"{path} is not valid json: {e}") from e

    if isinstance(document, Mapping):
        document = document.get("utxos")
    if not isinstance(document, list) or not all(
        isinstance(record, Mapping) for record in document
    ):
        raise InvalidUTxORecord(f"{path} doesn't contain a list of UTxOs")

    LOGGER.debug(f"Loaded {len(document)} UTxO records from {path}.")
    return document
