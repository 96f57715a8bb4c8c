"""Hook handler for Claude Code integration.

This module provides the `cctop-hook` CLI command that Claude Code calls on
every lifecycle hook to keep ~/.cctop/sessions/ current.

Entry point defined in pyproject.toml:
    cctop-hook = "cctop.hooks.handler:main"

Usage:
    echo '{"session_id": "...", "cwd": "..."}' | cctop-hook PreToolUse

The hook always exits 0 and never prints, so a failure here cannot block or
pollute the agent. Problems are logged to ~/.cctop/logs/_errors.log.
"""

import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

import click

from cctop.core.config import Config, load_config
from cctop.core.git import get_current_branch
from cctop.core.liveness import cleanup_sessions_for_project, cleanup_sessions_with_pid
from cctop.core.log import configure_logging, file_logger, get_logger
from cctop.core.session import Session, TerminalInfo, utc_now
from cctop.core.state import SessionStore, sanitize_session_id
from cctop.core.status import HookEvent
from cctop.core.transition import for_event
from cctop.hooks.payload import HookInput, PayloadError

logger = get_logger(__name__)

ERRORS_LOG = "_errors.log"


def read_stdin(timeout: float) -> str:
    """Read all of stdin, giving up after timeout seconds.

    The read runs in a daemon thread so a stream that never closes cannot
    keep the hook alive.

    Raises:
        TimeoutError: If stdin is still open after timeout.
        OSError: If reading fails.
    """
    result: dict[str, object] = {}

    def _read() -> None:
        try:
            result["data"] = sys.stdin.read()
        except (OSError, ValueError) as e:
            result["error"] = e

    reader = threading.Thread(target=_read, name="cctop-stdin", daemon=True)
    reader.start()
    reader.join(timeout)
    if reader.is_alive():
        raise TimeoutError(f"stdin read timed out after {timeout:g}s")
    if "error" in result:
        raise OSError(f"failed to read stdin: {result['error']}")
    return str(result.get("data") or "")


def get_parent_pid() -> int:
    """Get the pid of the process that invoked the hook (the agent)."""
    return os.getppid()


def capture_terminal_info() -> TerminalInfo:
    """Capture terminal context from the environment."""
    return TerminalInfo(
        program=os.environ.get("TERM_PROGRAM", ""),
        session_id=os.environ.get("ITERM_SESSION_ID") or os.environ.get("KITTY_WINDOW_ID"),
        tty=os.environ.get("TTY"),
    )


def session_label(cwd: str, session_id: str) -> str:
    """Short "project:idprefix" label for log lines."""
    project = Path(cwd).name or "unknown"
    return f"{project}:{session_id[:8]}"


def session_log_path(config: Config, session_id: str) -> Path:
    return config.logs_dir / f"{session_id}.log"


def remove_session_logs(config: Config, sessions: list[Session]) -> None:
    """Delete the hook logs of removed sessions."""
    for session in sessions:
        session_log_path(config, sanitize_session_id(session.session_id)).unlink(
            missing_ok=True
        )


def apply_event(
    session: Session,
    event: HookEvent,
    hook_input: HookInput,
    store: SessionStore,
) -> None:
    """Apply the field changes an event implies beyond its status.

    SessionStart also sweeps superseded and orphaned records.
    """
    if event is HookEvent.SESSION_START:
        session.clear_transient()
        session.pid = get_parent_pid()

        config = store.config
        removed = cleanup_sessions_for_project(
            store, hook_input.cwd, session.session_id, config.no_pid_max_age
        )
        removed += cleanup_sessions_with_pid(store, session.pid, session.session_id)
        remove_session_logs(config, removed)

    elif event is HookEvent.USER_PROMPT_SUBMIT:
        session.clear_transient()
        if hook_input.prompt is not None:
            session.last_prompt = hook_input.prompt

    elif event is HookEvent.PRE_TOOL_USE:
        if hook_input.tool_name is not None:
            session.last_tool = hook_input.tool_name
            session.last_tool_detail = hook_input.tool_detail

    elif event is HookEvent.PERMISSION_REQUEST:
        session.notification_message = hook_input.permission_message()
        session.last_tool = None
        session.last_tool_detail = None

    elif event.is_notification:
        session.last_tool = None
        session.last_tool_detail = None
        if hook_input.message is not None:
            session.notification_message = hook_input.message

    elif event is HookEvent.STOP:
        session.clear_transient()

    # PreCompact, PostToolUse and Unknown only change status


def handle_hook(hook_name: str, hook_input: HookInput, store: SessionStore) -> Session | None:
    """Update (or create) the session a hook event belongs to.

    Args:
        hook_name: Hook name from the command line, e.g. "PreToolUse".
        hook_input: Parsed stdin payload.
        store: Where session records live.

    Returns:
        The written session, or None for SessionEnd (a no-op; liveness
        cleanup removes ended sessions).

    Raises:
        PayloadError: If the session id is empty after sanitizing.
        OSError: If the record cannot be written.
    """
    event = HookEvent.parse(hook_name, hook_input.notification_type)
    if event is HookEvent.SESSION_END:
        return None

    safe_id = sanitize_session_id(hook_input.session_id)
    if not safe_id:
        raise PayloadError(f"unusable session id: {hook_input.session_id!r}")

    branch = get_current_branch(Path(hook_input.cwd))
    terminal = capture_terminal_info()

    session = store.load(safe_id)
    if session is None:
        session = Session.new(safe_id, hook_input.cwd, branch, terminal)

    old_status = session.status
    new_status = for_event(old_status, event)
    if new_status is not None:
        session.status = new_status

    session.last_activity = max(utc_now(), session.last_activity)
    session.branch = branch
    session.terminal = terminal

    apply_event(session, event, hook_input, store)

    store.write(session)

    with file_logger(session_log_path(store.config, safe_id), store.config.log_level) as log:
        log.info(
            "HOOK",
            hook=hook_name,
            session=session_label(hook_input.cwd, safe_id),
            transition=f"{old_status.value} -> {session.status.value}",
            preserved=new_status is None,
        )

    return session


@contextmanager
def _error_log(config: Config) -> Iterator[IO[str]]:
    """Open _errors.log for appending, or /dev/null if that fails."""
    try:
        config.logs_dir.mkdir(parents=True, exist_ok=True)
        f = (config.logs_dir / ERRORS_LOG).open("a")
    except OSError:
        f = open(os.devnull, "w")
    with f:
        yield f


@click.command()
@click.argument("hook_name", required=False)
@click.version_option(package_name="cctop")
def main(hook_name: str | None) -> None:
    """Claude Code hook handler for cctop session tracking.

    Reads the hook event JSON from stdin and updates the session file in
    ~/.cctop/sessions/.

    HOOK_NAME is one of: SessionStart, UserPromptSubmit, PreToolUse,
    PostToolUse, Stop, Notification, PermissionRequest, PreCompact,
    SessionEnd.
    """
    config = load_config()

    with _error_log(config) as errors:
        configure_logging(config.log_level, file=errors)

        if not hook_name:
            logger.error("missing hook name argument")
            return

        try:
            hook_input = HookInput.from_json(read_stdin(config.stdin_timeout_seconds))
            handle_hook(hook_name, hook_input, SessionStore(config))
        except (PayloadError, TimeoutError, OSError, ValueError) as e:
            logger.error("hook failed", hook=hook_name, error=str(e))
        except Exception:
            # Exit 0 regardless so the agent is never blocked
            logger.exception("hook crashed", hook=hook_name)


if __name__ == "__main__":
    main()
