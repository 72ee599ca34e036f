import logging

import click
from rich import box
from rich.table import Table

from clmm_accounting.cli.utils import (
    cli_logger_config,
    encoding_option,
    group_options,
    log_level_option,
    read_account_file,
)
from clmm_accounting.decoding import decode_account, detect_variant
from clmm_accounting.exceptions import MalformedAccount
from clmm_accounting.types import AccountKind, TickArray

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("cli").getChild("decode")


def _record_table(title: str, fields: dict) -> Table:
    record_table = Table(title=title, show_header=False, box=box.ROUNDED, highlight=True)
    record_table.add_column("Field", style="bold magenta")
    record_table.add_column("Value")

    for key, val in fields.items():
        record_table.add_row(key, str(val))
    return record_table


def _tick_table(tick_array: TickArray) -> Table:
    tick_table = Table(title=f"Initialized Ticks ({len(tick_array.ticks)})", min_width=80)
    tick_table.add_column("Tick Index", justify="right")
    tick_table.add_column("Liquidity Net", justify="right")
    tick_table.add_column("Liquidity Gross", justify="right")
    tick_table.add_column("Fee Growth Outside A", justify="right")
    tick_table.add_column("Fee Growth Outside B", justify="right")

    for tick in tick_array.ticks:
        tick_table.add_row(
            f"{tick.tick_index:,}",
            f"{tick.liquidity_net:,}",
            f"{tick.liquidity_gross:,}",
            str(tick.fee_growth_outside_a),
            str(tick.fee_growth_outside_b),
        )
    return tick_table


@click.command("decode", short_help="Decode a pool, position, or tick array account")
@group_options(encoding_option, log_level_option)
@click.argument("account_file", type=click.File("rb"))
@click.option(
    "--tick-spacing",
    "tick_spacing",
    type=int,
    default=None,
    help="Tick spacing of the pool.  Required when decoding tick arrays",
)
@click.option("--address", "address", default=None, help="Base58 address of the account")
def decode_command(account_file, encoding: str, log_level: str, tick_spacing: int | None, address: str | None):
    """
    Detects the protocol and kind of an account from its discriminator, and prints the decoded record
    """
    console = cli_logger_config(root_logger, log_level.upper())
    data = read_account_file(account_file, encoding)

    try:
        variant, kind = detect_variant(data)
        if kind == AccountKind.tick_array and tick_spacing is None:
            raise click.UsageError("--tick-spacing is required to decode tick array accounts")

        record = decode_account(
            data,
            kind=kind,
            variant=variant,
            address=address if kind != AccountKind.tick_array else None,
            tick_spacing=tick_spacing,
        )
    except (MalformedAccount, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    logger.info(f"Decoded {len(data)} byte {variant.pretty()} {kind.value} account")
    title = f"[bold green]{variant.pretty()} [white]{kind.value.replace('_', ' ').title()}"

    if isinstance(record, TickArray):
        console.print(_record_table(title, record.model_dump(mode="json", exclude={"ticks"})))
        console.print(_tick_table(record))
    else:
        console.print(_record_table(title, record.model_dump(mode="json")))
