"""Cleanup command for cctop."""

from datetime import timedelta

import click

from cctop.core.liveness import cleanup_stale_sessions
from cctop.core.state import SessionStore


@click.command()
@click.option(
    "--max-age-hours",
    type=click.FloatRange(min=0),
    default=None,
    help="Remove sessions idle for longer than this (default from config, 24)",
)
@click.pass_obj
def cleanup(obj: dict, max_age_hours: float | None) -> None:
    """Remove sessions with no activity for a long time.

    This also removes sessions that never recorded a process id, which
    the liveness check cannot prune.

    Examples:

        cctop cleanup

        cctop cleanup --max-age-hours 6
    """
    config = obj["config"]
    max_age = (
        config.stale_after if max_age_hours is None else timedelta(hours=max_age_hours)
    )

    try:
        removed = cleanup_stale_sessions(SessionStore(config), max_age)
    except OSError as e:
        click.echo(f"Error during cleanup: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Cleaned up {len(removed)} stale session(s)")
