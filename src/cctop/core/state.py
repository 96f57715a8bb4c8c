"""Session storage for cctop.

All session data is stored in ~/.cctop/sessions/ as one file per session:
- {session_id}.json: pretty-printed session record (see cctop.core.session)
- {session_id}.json.<random>.tmp: in-flight write, renamed over the .json file

There is no locking. Writers replace files with an atomic rename, so readers
polling the directory always see a complete old or new record. Different
session ids never share a file; two writers racing on the same id resolve as
last-rename-wins.
"""

import os
import re
import tempfile
from pathlib import Path

from cctop.core.config import Config
from cctop.core.log import get_logger
from cctop.core.session import Session, SessionDecodeError

SESSION_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"
MAX_SESSION_ID_LEN = 64

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")

logger = get_logger(__name__)


def sanitize_session_id(raw: str) -> str:
    """Make an untrusted session id safe to use as a file name.

    Keeps only ASCII letters, digits, "-" and "_", so no path separator or
    parent reference survives, and caps the length.

    Examples:
        "abc-123-def" -> "abc-123-def"
        "../../.bashrc" -> "bashrc"
        ".." -> ""
    """
    return _UNSAFE_ID_CHARS.sub("", raw)[:MAX_SESSION_ID_LEN]


def is_session_file(path: Path) -> bool:
    """Check if a directory entry looks like a finished session record."""
    name = path.name
    return name.endswith(SESSION_SUFFIX) and not name.startswith(".")


class SessionStore:
    """Directory of session records.

    Args:
        config: Supplies the sessions directory.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.sessions_dir = config.sessions_dir

    def path_for(self, session_id: str) -> Path:
        """Get the record path for a session id.

        Raises:
            ValueError: If nothing usable is left after sanitizing.
        """
        safe_id = sanitize_session_id(session_id)
        if not safe_id:
            raise ValueError(f"Invalid session id: {session_id!r}")
        return self.sessions_dir / f"{safe_id}{SESSION_SUFFIX}"

    def write(self, session: Session) -> None:
        """Write a session atomically (temp file + rename).

        Raises:
            OSError: If the directory cannot be created or the write fails.
        """
        path = self.path_for(session.session_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        # One temp file per writer
        tmp = tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f"{path.name}.", suffix=TEMP_SUFFIX, delete=False
        )
        temp_path = Path(tmp.name)
        try:
            with tmp:
                tmp.write(session.to_json())
            os.replace(temp_path, path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    def read(self, session_id: str) -> Session:
        """Read one session.

        Raises:
            FileNotFoundError: If no record exists.
            SessionDecodeError: If the record cannot be parsed.
        """
        return Session.from_json(self.path_for(session_id).read_bytes())

    def load(self, session_id: str) -> Session | None:
        """Read one session, treating a missing or corrupt record as absent."""
        try:
            return self.read(session_id)
        except FileNotFoundError:
            return None
        except SessionDecodeError as e:
            logger.warning("corrupt session file", session_id=session_id, error=str(e))
            return None

    def exists(self, session_id: str) -> bool:
        return self.path_for(session_id).exists()

    def remove(self, session_id: str) -> bool:
        """Delete a session record.

        Returns:
            True if a record was removed, False if it was already gone.
        """
        try:
            self.path_for(session_id).unlink()
        except FileNotFoundError:
            return False
        return True

    def list_all(self) -> list[Session]:
        """Load every readable session, including ones whose process died.

        Temp files and other extensions are ignored. Unreadable records are
        skipped with a warning, and files deleted mid-listing are skipped
        silently.

        Raises:
            OSError: If the directory exists but cannot be listed.
        """
        if not self.sessions_dir.exists():
            return []

        sessions = []
        for path in sorted(self.sessions_dir.iterdir()):
            if not is_session_file(path):
                continue
            try:
                sessions.append(Session.from_json(path.read_bytes()))
            except FileNotFoundError:
                continue
            except (SessionDecodeError, OSError) as e:
                logger.warning("skipping unreadable session file", path=str(path), error=str(e))
        return sessions

    def find_by_prefix(self, prefix: str) -> list[Session]:
        """Get all sessions whose id starts with prefix."""
        return [s for s in self.list_all() if s.session_id.startswith(prefix)]

    def reset(self, session_id: str) -> Session:
        """Reset a stuck session to idle, clearing tool and notification state.

        Raises:
            FileNotFoundError: If no record exists.
            SessionDecodeError: If the record cannot be parsed.
        """
        session = self.read(session_id)
        session.reset()
        self.write(session)
        return session
