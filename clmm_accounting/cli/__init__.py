import click

from clmm_accounting.cli.decode import decode_command
from clmm_accounting.cli.position import fees_command, tick_arrays_command, value_command


@click.group()
def clmm_cli():
    """Command Line Interface for Concentrated Liquidity Position Accounting"""


# Adding Commands
clmm_cli.add_command(decode_command, name="decode")
clmm_cli.add_command(fees_command, name="fees")
clmm_cli.add_command(value_command, name="value")
clmm_cli.add_command(tick_arrays_command, name="tick-arrays")
