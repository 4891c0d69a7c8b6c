from collections.abc import Iterable

import structlog

from datatypes.utxo import UTxO
from datatypes.wallet import Wallet
from selection.context import NotEnoughBitcoin, Selection

LOGGER = structlog.stdlib.get_logger(__name__)


def greatest_first(wallet: Wallet, target: int) -> Selection:
    """Pick UTxOs from the largest to the smallest until target is covered.

    This is the default coin selection of the LND wallet when funding
    channels. UTxOs with equal amounts are picked in wallet order.

    Args:
        wallet: the pool of UTxOs to select from.
        target: the amount to cover, in satoshis.

    Raises:
        NotEnoughBitcoin: if the whole wallet doesn't cover the target.
    """
    if target < 0:
        raise ValueError("the amount to select can't be negative")

    remaining: int = target
    selected: list[UTxO] = []
    for utxo in wallet:
        if remaining <= 0:
            break
        selected.append(utxo)
        remaining -= utxo.amount
        LOGGER.debug(
            "UTxO selected",
            outpoint=str(utxo.outpoint),
            amount=utxo.amount,
            remaining=remaining,
        )

    if remaining > 0:
        LOGGER.warning(
            str(NotEnoughBitcoin()), target=target, balance=wallet.balance
        )
        raise NotEnoughBitcoin(target, wallet.balance)

    return Selection(inputs=tuple(selected), target=target, remaining=remaining)


def select_coins(utxos: Iterable[UTxO], target: int) -> Selection:
    """Run greatest_first over a plain collection of UTxOs."""
    return greatest_first(Wallet.from_utxos(utxos), target)
