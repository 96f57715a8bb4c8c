"""Config command for cctop.

Shows the effective configuration and updates ~/.cctop/config.json.
"""

import click
import orjson

from cctop.core.config import load_config, read_settings, write_settings


@click.command("config")
@click.option(
    "--stale-after-hours",
    type=click.FloatRange(min=0),
    help="Age after which `cctop cleanup` removes a session",
)
@click.option(
    "--no-pid-max-age-hours",
    type=click.FloatRange(min=0),
    help="Age after which a session without a pid is swept at SessionStart",
)
@click.option(
    "--stdin-timeout-seconds",
    type=click.FloatRange(min=0, min_open=True),
    help="How long cctop-hook waits for its payload",
)
@click.pass_obj
def config_cmd(
    obj: dict,
    stale_after_hours: float | None,
    no_pid_max_age_hours: float | None,
    stdin_timeout_seconds: float | None,
) -> None:
    """Print the effective configuration as JSON.

    Options given are saved to config.json first.

    Examples:

        cctop config

        cctop config --stale-after-hours 12
    """
    config = obj["config"]
    updates = {
        "stale_after_hours": stale_after_hours,
        "no_pid_max_age_hours": no_pid_max_age_hours,
        "stdin_timeout_seconds": stdin_timeout_seconds,
    }
    updates = {key: value for key, value in updates.items() if value is not None}

    if updates:
        settings = read_settings(config.config_path)
        settings.update(updates)
        try:
            write_settings(config.config_path, settings)
        except OSError as e:
            click.echo(f"Failed to write {config.config_path}: {e}", err=True)
            raise SystemExit(1)
        config = load_config(config.base_dir)
        obj["config"] = config

    click.echo(orjson.dumps(config.to_dict(), option=orjson.OPT_INDENT_2).decode())
