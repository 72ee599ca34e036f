import logging

import click
from rich.table import Table

from clmm_accounting.cli.utils import (
    cli_logger_config,
    encoding_option,
    group_options,
    log_level_option,
    lower_array_option,
    pool_address_option,
    pool_file_option,
    position_address_option,
    position_file_option,
    read_account_file,
    upper_array_option,
)
from clmm_accounting.exceptions import POSITION_ERRORS
from clmm_accounting.types import AccountKind, PositionSnapshot

# pylint: disable=too-many-arguments

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("cli").getChild("position")

position_input_options = group_options(
    pool_file_option,
    position_file_option,
    lower_array_option,
    upper_array_option,
    pool_address_option,
    position_address_option,
    encoding_option,
    log_level_option,
)


def _evaluate_from_files(
    pool_file,
    position_file,
    lower_array_file,
    upper_array_file,
    pool_address: str | None,
    position_address: str | None,
    encoding: str,
) -> PositionSnapshot:
    from clmm_accounting.position import evaluate_position  # pylint: disable=import-outside-toplevel

    try:
        return evaluate_position(
            pool_data=read_account_file(pool_file, encoding),
            position_data=read_account_file(position_file, encoding),
            lower_tick_array_data=read_account_file(lower_array_file, encoding),
            upper_tick_array_data=read_account_file(upper_array_file, encoding) if upper_array_file else None,
            pool_address=pool_address,
            position_address=position_address,
        )
    except POSITION_ERRORS as exc:
        raise click.ClickException(f"{exc.__class__.__name__}: {exc}") from exc


@click.command("fees", short_help="Compute uncollected fees of a position")
@position_input_options
def fees_command(
    pool_file,
    position_file,
    lower_array_file,
    upper_array_file,
    pool_address,
    position_address,
    encoding,
    log_level,
):
    """
    Computes the uncollected fees of a position in raw token units.  All accounts must be captured at the
    same slot.
    """
    console = cli_logger_config(root_logger, log_level.upper())
    snapshot = _evaluate_from_files(
        pool_file, position_file, lower_array_file, upper_array_file, pool_address, position_address, encoding
    )

    fee_table = Table(title=f"[bold green]{snapshot.pool.variant.pretty()} [white]Uncollected Fees", min_width=80)
    fee_table.add_column("Token")
    fee_table.add_column("Mint")
    fee_table.add_column("Uncollected (raw)", justify="right")

    fee_table.add_row("A", snapshot.pool.asset_mint_a, f"{snapshot.fees.uncollected_a:,}")
    fee_table.add_row("B", snapshot.pool.asset_mint_b, f"{snapshot.fees.uncollected_b:,}")
    console.print(fee_table)


@click.command("value", short_help="Value a position in token units & fiat")
@position_input_options
@click.option("--decimals-a", "decimals_a", type=int, default=None, help="Decimals of token A")
@click.option("--decimals-b", "decimals_b", type=int, default=None, help="Decimals of token B")
@click.option("--price-a", "price_a", type=str, default=None, help="Fiat price of one whole token A")
@click.option("--price-b", "price_b", type=str, default=None, help="Fiat price of one whole token B")
def value_command(
    pool_file,
    position_file,
    lower_array_file,
    upper_array_file,
    pool_address,
    position_address,
    encoding,
    log_level,
    decimals_a,
    decimals_b,
    price_a,
    price_b,
):
    """
    Computes the token amounts & uncollected fees of a position, scaled by mint decimals.  Fiat values are
    shown for tokens with a price.  Whirlpool pools do not store decimals, so --decimals-a and --decimals-b
    are required for Orca positions.
    """
    # pylint: disable=too-many-locals
    from decimal import Decimal, InvalidOperation  # pylint: disable=import-outside-toplevel

    from clmm_accounting.valuation import value_position  # pylint: disable=import-outside-toplevel

    console = cli_logger_config(root_logger, log_level.upper())
    snapshot = _evaluate_from_files(
        pool_file, position_file, lower_array_file, upper_array_file, pool_address, position_address, encoding
    )

    prices = {}
    for mint, price in ((snapshot.pool.asset_mint_a, price_a), (snapshot.pool.asset_mint_b, price_b)):
        if price is None:
            continue
        try:
            prices[mint] = Decimal(price)
        except InvalidOperation as exc:
            raise click.BadParameter(f"Price {price} is not a decimal number") from exc

    try:
        valuation = value_position(snapshot, decimals_a=decimals_a, decimals_b=decimals_b, prices=prices)
    except POSITION_ERRORS as exc:
        raise click.ClickException(f"{exc.__class__.__name__}: {exc}") from exc

    range_status = "[green]In Range" if valuation.in_range else "[yellow]Out of Range"
    value_table = Table(title=f"[bold green]{snapshot.pool.variant.pretty()} [white]Position ({range_status}[white])")
    value_table.add_column("Token")
    value_table.add_column("Mint")
    value_table.add_column("Amount", justify="right")
    value_table.add_column("Uncollected Fees", justify="right")
    value_table.add_column("Price", justify="right")
    value_table.add_column("Value", justify="right")

    for label, side in (("A", valuation.token_a), ("B", valuation.token_b)):
        value_table.add_row(
            label,
            side.mint,
            str(side.amount),
            str(side.fees),
            "-" if side.price is None else str(side.price),
            "-" if side.value is None else str(side.value + side.fee_value),  # type: ignore[operator]
        )
    console.print(value_table)

    if valuation.total_value is not None:
        console.print(f"Total Value: [bold]{valuation.total_value}[/bold]  (Fees: {valuation.total_fee_value})")


@click.command("tick-arrays", short_help="Derive the tick array & position addresses of a position")
@group_options(pool_file_option, position_file_option, pool_address_option, encoding_option, log_level_option)
def tick_arrays_command(pool_file, position_file, pool_address, encoding, log_level):
    """
    Derives the addresses of the tick arrays holding a position's lower & upper ticks, so they can be fetched
    for the fees & value commands
    """
    # pylint: disable=import-outside-toplevel
    from clmm_accounting.addresses import position_address, position_tick_array_addresses
    from clmm_accounting.decoding import decode_account

    console = cli_logger_config(root_logger, log_level.upper())

    try:
        pool = decode_account(read_account_file(pool_file, encoding), kind=AccountKind.pool, address=pool_address)
        position = decode_account(
            read_account_file(position_file, encoding), kind=AccountKind.position, variant=pool.variant
        )
        lower, upper = position_tick_array_addresses(pool, position)
    except POSITION_ERRORS as exc:
        raise click.ClickException(f"{exc.__class__.__name__}: {exc}") from exc

    address_table = Table(title=f"[bold green]{pool.variant.pretty()} [white]Tick Arrays")
    address_table.add_column("Tick")
    address_table.add_column("Array Start", justify="right")
    address_table.add_column("Address", no_wrap=True)

    address_table.add_row("Lower", str(lower[0]), lower[1])
    address_table.add_row("Upper", str(upper[0]), upper[1])
    console.print(address_table)

    console.print(f"Position Account: {position_address(position.position_mint, pool.variant)}")
