"""Shared pytest fixtures for cctop tests."""

from datetime import datetime, timedelta, timezone

import pytest
from click.testing import CliRunner

from cctop.core.config import Config
from cctop.core.log import configure_logging
from cctop.core.session import Session, TerminalInfo
from cctop.core.state import SessionStore
from cctop.core.status import Status

# Far above any real pid_max, so never alive
DEAD_PID = 999_999_999


@pytest.fixture(autouse=True)
def _stderr_logging():
    """Route logging to stderr before each test.

    The hook entry point points structlog at a log file it closes on exit.
    """
    configure_logging("DEBUG")


@pytest.fixture
def cctop_home(tmp_path, monkeypatch):
    """Point cctop at an isolated base directory.

    Clears the other overrides so the developer's environment cannot leak in.
    """
    home = tmp_path / "cctop"
    monkeypatch.setenv("CCTOP_HOME", str(home))
    monkeypatch.delenv("CCTOP_SESSIONS_DIR", raising=False)
    monkeypatch.delenv("CCTOP_DEMO", raising=False)
    return home


@pytest.fixture
def config(cctop_home):
    """Config rooted at the isolated base directory."""
    return Config.for_dir(cctop_home)


@pytest.fixture
def store(config):
    """Empty session store in a temp directory."""
    config.ensure_dirs()
    return SessionStore(config)


@pytest.fixture
def runner():
    """Click CLI test runner."""
    return CliRunner()


def _make_session(
    session_id: str = "abc123",
    project_path: str = "/nonexistent/test/projects/testproj",
    status: Status = Status.IDLE,
    pid: int | None = None,
    age: timedelta = timedelta(0),
    **fields,
) -> Session:
    """Build a session whose last activity was `age` ago."""
    now = datetime.now(timezone.utc)
    session = Session(
        session_id=session_id,
        project_path=project_path,
        branch="main",
        status=status,
        last_prompt=fields.pop("last_prompt", "Fix the bug"),
        last_activity=now - age,
        started_at=now - age - timedelta(minutes=5),
        terminal=TerminalInfo(program="iTerm.app", session_id="w0t0p0:1", tty="/dev/ttys003"),
        pid=pid,
        **fields,
    )
    return session


@pytest.fixture
def make_session():
    """Factory for sessions with sensible test defaults."""
    return _make_session


@pytest.fixture
def dead_pid():
    """A pid far above any real pid_max, so never alive."""
    return DEAD_PID
