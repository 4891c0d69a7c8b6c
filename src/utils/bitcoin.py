from decimal import ROUND_DOWN, Decimal

# sats = satoshis

#: the amount of satoshis in one bitcoin
COIN = 100_000_000

#: the different size categories a VarInt may fall in
VARINT_S: int = 0xFC
VARINT_M: int = 0xFFFF
VARINT_L: int = 0xFFFFFFFF
VARINT_XL: int = 0xFFFFFFFFFFFFFFFF


def get_var_int_size(length: int) -> int:
    """Get the size of a transaction VarInt (CompactSize) field.

    Args:
        length: the length or count of items the VarInt will use.

    Returns:
        The bytes taken by the VarInt to express its value.
    """
    if length < 0 or length > VARINT_XL:
        raise ValueError(f"{length} can't be encoded as a VarInt")

    size: int = 9
    if length <= VARINT_S:
        size = 1
    elif length <= VARINT_M:
        size = 3
    elif length <= VARINT_L:
        size = 5

    return size


def btc_round(amount: Decimal | float | str) -> Decimal:
    """Round down bitcoin quantities up to the eighth decimal.

    Args:
        amount: the original bitcoin amount to round down.

    Returns:
        The amount of bitcoin rounded down to the eighth decimal.
    """
    # str() avoids carrying the binary expansion of floats like 3.6
    return Decimal(str(amount)).quantize(
        Decimal("0.00000001"), rounding=ROUND_DOWN
    )


def btc_to_sat(amount: Decimal | float | str) -> int:
    """Conversor from bitcoin to satoshis.

    Args:
        amount: the bitcoin amount expressed in bitcoin units.

    Returns:
        The same amount of bitcoin expressed in satoshis.
    """
    return int(btc_round(amount) * COIN)


def sat_to_btc(amount: int) -> Decimal:
    """Conversor from satoshis to bitcoin.

    Args:
        amount: the bitcoin amount expressed in satoshis.

    Returns:
        The bitcoin amount expressed in bitcoin units.
    """
    return btc_round(Decimal(amount) / COIN)


def btc_to_str(amount: Decimal | float | str) -> str:
    """A string representation of the bitcoin amount.

    Args:
        amount: the bitcoin amount expressed in bitcoin units.

    Returns:
        A string representing the bitcoin amount with eight decimal points.
    """
    return f"{btc_round(amount):.8f}"
