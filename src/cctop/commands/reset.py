"""Reset command for cctop."""

import click

from cctop.core.session import SessionDecodeError
from cctop.core.state import SessionStore


@click.command()
@click.argument("session_id")
@click.pass_obj
def reset(obj: dict, session_id: str) -> None:
    """Reset a stuck session to idle.

    Clears the tool and notification state but keeps the session's
    identity, pid and last prompt.

    SESSION_ID may be any unambiguous prefix of the id.

    Examples:

        cctop reset 550e8400
    """
    store = SessionStore(obj["config"])
    try:
        matches = store.find_by_prefix(session_id)
    except OSError as e:
        click.echo(f"Failed to load sessions: {e}", err=True)
        raise SystemExit(1)

    if not matches:
        click.echo(f'No session found matching "{session_id}"', err=True)
        raise SystemExit(1)

    if len(matches) > 1:
        click.echo(
            f'Ambiguous prefix "{session_id}": matches {len(matches)} sessions. '
            "Be more specific.",
            err=True,
        )
        for s in matches:
            click.echo(f"  {s.session_id[:12]} ({s.project_name})", err=True)
        raise SystemExit(1)

    try:
        session = store.reset(matches[0].session_id)
    except FileNotFoundError:
        click.echo(f'Session "{session_id}" disappeared', err=True)
        raise SystemExit(1)
    except (SessionDecodeError, OSError) as e:
        click.echo(f"Failed to reset session: {e}", err=True)
        raise SystemExit(1)

    click.echo(f'Reset "{session.project_name}" to idle')
