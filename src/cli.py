"""Command line interface of the channel opening fee estimator.

Includes the following:
    - festivus (group): the entry point, sets up settings and logging.
    - estimate_fees (command): print the projected fees of opening a channel.
"""
from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click
import structlog

from datatypes.fee_rate import ProjectedFees
from datatypes.utxo import UTxO
from datatypes.wallet import load_utxo_records
from errors import FestivusError
from estimate import FeeEstimate, estimate
from fees.source import FeeRateSource
from log_config import configure_loggers
from settings import Settings, get_settings
from utils.bitcoin import btc_to_sat, btc_to_str, sat_to_btc

LOGGER = structlog.stdlib.get_logger(__name__)


def format_report(fees: ProjectedFees) -> str:
    return json.dumps(fees.as_dict(), indent=2)


def parse_amount(amount: str, in_btc: bool) -> int:
    """Parse the channel amount, given in satoshis or in bitcoin."""
    try:
        if in_btc:
            sats = btc_to_sat(Decimal(amount))
        else:
            sats = int(amount)
    except (InvalidOperation, ValueError) as e:
        raise click.BadParameter(f"{amount!r} is not a valid amount") from e
    if sats < 0:
        raise click.BadParameter("the amount can't be negative")
    return sats


@click.group(help="Estimate the on-chain fees of opening a channel.")
@click.option(
    "--log-level",
    default=None,
    help="Logging level. Defaults to FESTIVUS_LOG_LEVEL or INFO.",
)
@click.pass_context
def festivus(ctx: click.Context, log_level: str | None) -> None:
    settings: Settings = get_settings()
    configure_loggers(log_level or settings.log_level)
    ctx.obj = {"settings": settings}


@festivus.command(
    "estimate", help="Print the projected fees of a channel funding tx."
)
@click.option(
    "-a",
    "--amount",
    required=True,
    help="The channel capacity, in satoshis (or bitcoin with --btc).",
)
@click.option(
    "--btc",
    "in_btc",
    is_flag=True,
    default=False,
    help="Read the amount as bitcoin instead of satoshis.",
)
@click.option(
    "-u",
    "--utxos",
    "utxos_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with the wallet UTxOs, as listed by `lncli listunspent`.",
)
@click.option(
    "-f",
    "--fee-rate",
    type=click.IntRange(min=0),
    default=None,
    help="Use this sat/vB fee rate for every tier instead of mempool.space.",
)
@click.option(
    "--fee-api-url",
    default=None,
    help="The recommended fees endpoint. Defaults to FESTIVUS_FEE_API_URL.",
)
@click.pass_obj
def estimate_fees(
    ctx,
    amount: str,
    in_btc: bool,
    utxos_path: Path | None,
    fee_rate: int | None,
    fee_api_url: str | None,
) -> None:
    """Parse the command options and print the fee report.

    Args:
        ctx: dictionary holding the settings loaded by the parent command.
        amount: the channel capacity.
        in_btc: if set, the amount is expressed in bitcoin.
        utxos_path: if set, the file listing the UTxOs to fund the channel
            with. Otherwise a single UTxO holding the exact amount is assumed.
        fee_rate: if set, the fee rate for every tier.
        fee_api_url: if set, the fee oracle to request the fee rates from.
    """
    settings: Settings = ctx["settings"]
    sats: int = parse_amount(amount, in_btc)

    try:
        utxos: list[UTxO] | None = None
        if utxos_path is not None:
            utxos = [
                UTxO.from_record(record)
                for record in load_utxo_records(utxos_path)
            ]
        fee_source = FeeRateSource(
            url=fee_api_url or settings.fee_api_url,
            timeout=settings.request_timeout,
        )
        result: FeeEstimate = estimate(
            utxos, sats, fee_rate=fee_rate, fee_source=fee_source
        )
    except FestivusError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Channel: {sats} sats ({btc_to_str(sat_to_btc(sats))} BTC), "
        f"inputs: {len(result.selection.inputs)}, "
        f"change: {result.selection.change} sats, "
        f"vsize: {result.vsize} vB"
    )
    click.echo(format_report(result.fees))


if __name__ == "__main__":
    festivus()
