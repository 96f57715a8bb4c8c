"""CLI entry point for cctop.

Usage:
    cctop                     # Launch TUI
    cctop list                # List live sessions as text
    cctop reset <id>          # Reset a stuck session to idle
    cctop cleanup             # Remove sessions idle for over 24h
    cctop dot                 # Print the status state machine
    cctop setup               # Install Claude Code hooks
"""

import click

from cctop.commands.check import check
from cctop.commands.cleanup import cleanup
from cctop.commands.config import config_cmd
from cctop.commands.dot import dot
from cctop.commands.list import list_cmd
from cctop.commands.reset import reset
from cctop.commands.setup import setup
from cctop.commands.top import top
from cctop.commands.uninstall import uninstall
from cctop.core.config import load_config
from cctop.core.log import configure_logging


@click.group(invoke_without_command=True)
@click.version_option(package_name="cctop")
@click.pass_context
def main(ctx: click.Context) -> None:
    """cctop - Monitor Claude Code sessions across workspaces.

    Running 'cctop' without a subcommand launches the TUI.

    Set CCTOP_DEMO=1 to skip session liveness checks.
    """
    config = load_config()
    configure_logging(config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(top)


# Register commands
main.add_command(top)
main.add_command(list_cmd)
main.add_command(reset)
main.add_command(cleanup)
main.add_command(dot)
main.add_command(config_cmd)
main.add_command(setup)
main.add_command(uninstall)
main.add_command(check)
