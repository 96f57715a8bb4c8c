"""Uninstall command for cctop.

Removes cctop from the system:
- cctop hooks from Claude Code settings
- ~/.cctop directory (session records and logs), and a sessions directory
  set outside it with CCTOP_SESSIONS_DIR, unless --keep-data
"""

import shutil

import click
import orjson

from cctop.hooks.install import get_claude_settings_path, uninstall_hooks


@click.command()
@click.option("--keep-data", is_flag=True, help="Keep ~/.cctop (sessions and logs)")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def uninstall(obj: dict, keep_data: bool, yes: bool) -> None:
    """Remove cctop hooks and data.

    Examples:

        cctop uninstall

        cctop uninstall --keep-data -y
    """
    config = obj["config"]
    data_dirs = [config.base_dir]
    if not config.sessions_dir.is_relative_to(config.base_dir):
        data_dirs.append(config.sessions_dir)

    if not yes:
        target = "hooks"
        if not keep_data:
            target += " and " + ", ".join(str(d) for d in data_dirs)
        click.confirm(f"Remove cctop {target}?", abort=True)

    try:
        uninstall_hooks()
    except orjson.JSONDecodeError as e:
        click.echo(f"{get_claude_settings_path()} is not valid JSON: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Removed cctop hooks from {get_claude_settings_path()}")

    if keep_data:
        return
    for data_dir in data_dirs:
        if data_dir.exists():
            shutil.rmtree(data_dir)
            click.echo(f"Removed {data_dir}")
