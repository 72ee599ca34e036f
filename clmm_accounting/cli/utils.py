import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler

from clmm_accounting.utils import to_bytes

root_logger = logging.getLogger("clmm_accounting")
logger = root_logger.getChild("cli")


def cli_logger_config(instrument_logger: Logger, log_level: str = "WARNING") -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(log_level)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


def read_account_file(account_file, encoding: str) -> bytes:
    """Reads an account file opened in binary mode, and converts its contents into raw account bytes"""
    try:
        return to_bytes(account_file.read(), encoding)  # type: ignore[arg-type]
    except ValueError as exc:
        raise click.BadParameter(f"{account_file.name}: {exc}") from exc


# -------------------------------------------------------
#    CLI Configurations
# -------------------------------------------------------
encoding_option = click.option(
    "--encoding",
    "-e",
    "encoding",
    type=click.Choice(["raw", "base64", "hex"]),
    default=os.environ.get("CLMM_ACCOUNT_ENCODING", "raw"),
    show_default=True,
    help="Encoding of account files.  If not provided, will use the CLMM_ACCOUNT_ENCODING environment variable",
)
log_level_option = click.option(
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=os.environ.get("CLMM_LOG_LEVEL", "WARNING"),
    show_default=True,
    help="Log level for CLI output.  If not provided, will use the CLMM_LOG_LEVEL environment variable",
)


# -------------------------------------------------------
#    Account Inputs
# -------------------------------------------------------
pool_file_option = click.option(
    "--pool",
    "pool_file",
    type=click.File("rb"),
    required=True,
    help="File containing the pool account data",
)
position_file_option = click.option(
    "--position",
    "position_file",
    type=click.File("rb"),
    required=True,
    help="File containing the position account data",
)
lower_array_option = click.option(
    "--lower-array",
    "lower_array_file",
    type=click.File("rb"),
    required=True,
    help="File containing the tick array that holds the position's lower tick",
)
upper_array_option = click.option(
    "--upper-array",
    "upper_array_file",
    type=click.File("rb"),
    default=None,
    help="File containing the tick array that holds the position's upper tick.  Defaults to --lower-array",
)
pool_address_option = click.option(
    "--pool-address",
    "pool_address",
    default=None,
    help="Base58 address of the pool.  When provided, the position is checked against this pool",
)
position_address_option = click.option(
    "--position-address",
    "position_address",
    default=None,
    help="Base58 address of the position account",
)
