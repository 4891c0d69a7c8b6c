"""Base exceptions shared by the whole fee estimation pipeline.

The exceptions raised by a specific stage live in the module of that stage:
    - selection.context.NotEnoughBitcoin
    - fees.source.FeeSourceUnavailable
"""


class FestivusError(Exception):
    """Base class of every error the fee estimation can end with."""


class InvalidUTxORecord(FestivusError, ValueError):
    """Raise when a wallet UTxO record can't be turned into a UTxO."""
