"""Setup command for cctop.

Installs hooks and prepares the sessions directory.
"""

import click
import orjson

from cctop.hooks.install import get_claude_settings_path, install_hooks


@click.command()
@click.pass_obj
def setup(obj: dict) -> None:
    """Set up cctop integration with Claude Code.

    This command:

    \b
    1. Creates ~/.cctop/sessions and ~/.cctop/logs
    2. Installs a cctop-hook entry for every Claude Code lifecycle hook
       into ~/.claude/settings.json, keeping existing hooks

    Examples:

        cctop setup
    """
    config = obj["config"]
    try:
        config.ensure_dirs()
    except OSError as e:
        click.echo(f"Could not create {config.sessions_dir}: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Sessions directory: {config.sessions_dir}")

    click.echo("Installing cctop hooks...")
    try:
        install_hooks()
    except orjson.JSONDecodeError as e:
        click.echo(f"{get_claude_settings_path()} is not valid JSON: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Hooks installed to {get_claude_settings_path()}")

    click.echo()
    click.echo("Restart running Claude Code sessions to start tracking them.")
    click.echo("Run 'cctop' to start the TUI.")
