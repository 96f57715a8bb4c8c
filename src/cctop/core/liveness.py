"""Process liveness checks and session garbage collection for cctop.

Cleanup only deletes records it can prove are garbage:
- A record with a pid is dead once that process no longer exists.
- A record without a pid is indeterminate and only removed by age.
"""

import os
from datetime import datetime, timedelta

from cctop.core.log import get_logger
from cctop.core.session import Session, utc_now
from cctop.core.state import SessionStore

logger = get_logger(__name__)


def is_pid_alive(pid: int) -> bool:
    """Check if a process exists using a zero signal.

    Permission errors (another user's process) count as alive.
    """
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except (ProcessLookupError, OverflowError):
        return False
    except OSError:
        # EPERM and friends: the process may exist, keep it
        return True
    return True


def is_dead(session: Session) -> bool:
    """True only if the session has a pid and that process is gone."""
    return session.pid is not None and not is_pid_alive(session.pid)


def is_older_than(session: Session, max_age: timedelta, now: datetime | None = None) -> bool:
    now = now or utc_now()
    return now - session.last_activity > max_age


def load_live_sessions(store: SessionStore) -> list[Session]:
    """List sessions, deleting records whose owning process has exited.

    Sessions without a pid are kept. In demo mode nothing is filtered.
    """
    sessions = store.list_all()
    if store.config.demo:
        return sessions

    live = []
    for session in sessions:
        if is_dead(session):
            logger.debug("removing dead session", session_id=session.session_id, pid=session.pid)
            _remove_quietly(store, session)
        else:
            live.append(session)
    return live


def cleanup_stale_sessions(store: SessionStore, max_age: timedelta) -> list[Session]:
    """Delete every session whose last activity is older than max_age.

    Returns:
        The removed sessions.
    """
    now = utc_now()
    removed = []
    for session in store.list_all():
        if is_older_than(session, max_age, now):
            logger.debug(
                "removing stale session",
                session_id=session.session_id,
                last_activity=session.last_activity.isoformat(),
            )
            if _remove_quietly(store, session):
                removed.append(session)
    return removed


def cleanup_sessions_with_pid(store: SessionStore, pid: int, current_session_id: str) -> list[Session]:
    """Delete other sessions owned by the same process.

    A resumed agent mints a new session id but keeps its pid, so older
    records for that pid are superseded.

    Returns:
        The removed sessions.
    """
    removed = []
    for session in store.list_all():
        if session.pid == pid and session.session_id != current_session_id:
            if _remove_quietly(store, session):
                removed.append(session)
    return removed


def cleanup_sessions_for_project(
    store: SessionStore,
    project_path: str,
    current_session_id: str,
    no_pid_max_age: timedelta,
) -> list[Session]:
    """Delete orphaned sessions of the same project.

    Removes sessions whose pid is dead, and pid-less sessions older than
    no_pid_max_age. Sessions with a live pid are always kept.

    Returns:
        The removed sessions.
    """
    now = utc_now()
    removed = []
    for session in store.list_all():
        if session.project_path != project_path or session.session_id == current_session_id:
            continue
        if session.pid is not None:
            should_remove = not is_pid_alive(session.pid)
        else:
            should_remove = is_older_than(session, no_pid_max_age, now)
        if should_remove and _remove_quietly(store, session):
            removed.append(session)
    return removed


def _remove_quietly(store: SessionStore, session: Session) -> bool:
    """Remove a record, logging instead of raising on failure."""
    try:
        return store.remove(session.session_id)
    except (OSError, ValueError) as e:
        logger.warning("could not remove session", session_id=session.session_id, error=str(e))
        return False
