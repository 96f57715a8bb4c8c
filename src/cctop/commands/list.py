"""List command for cctop.

Prints sessions as text, most urgent first.
"""

import click

from cctop.core.liveness import load_live_sessions
from cctop.core.session import format_relative_time, sort_sessions, truncate_prompt
from cctop.core.state import SessionStore


@click.command("list")
@click.option(
    "--all", "show_all", is_flag=True, help="Include sessions whose process has exited"
)
@click.pass_obj
def list_cmd(obj: dict, show_all: bool) -> None:
    """List sessions as text.

    By default dead sessions are pruned before listing. With --all the raw
    directory contents are shown and nothing is deleted.

    Examples:

        cctop list

        cctop list --all
    """
    store = SessionStore(obj["config"])
    try:
        sessions = store.list_all() if show_all else load_live_sessions(store)
    except OSError as e:
        click.echo(f"Failed to load sessions: {e}", err=True)
        raise SystemExit(1)

    if not sessions:
        click.echo("No active sessions")
        return

    click.echo(f"{len(sessions)} session(s):\n")
    for session in sort_sessions(sessions):
        status = session.status.value.upper()
        time_ago = format_relative_time(session.last_activity)
        click.echo(
            f"[{status}] {session.project_name} ({session.branch}) - {time_ago}"
            f"  id:{session.session_id[:8]}"
        )
        if session.last_prompt:
            click.echo(f'  "{truncate_prompt(session.last_prompt, 60)}"')
