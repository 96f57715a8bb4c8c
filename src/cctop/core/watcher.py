"""Sessions directory watcher for cctop.

Runs watchfiles in a background thread and exposes a non-blocking
poll_changes() for readers with their own refresh loop. A burst of
filesystem changes collapses into a single reload.
"""

import queue
import threading
from enum import Enum
from pathlib import Path

from watchfiles import Change, watch

from cctop.core.liveness import load_live_sessions
from cctop.core.log import get_logger
from cctop.core.session import Session
from cctop.core.state import SessionStore, is_session_file

logger = get_logger(__name__)

RawChange = tuple[Change, str]


class ChangeKind(Enum):
    CREATED = "created"
    MODIFIED = "modified"
    REMOVED = "removed"
    IRRELEVANT = "irrelevant"


_KINDS = {
    Change.added: ChangeKind.CREATED,
    Change.modified: ChangeKind.MODIFIED,
    Change.deleted: ChangeKind.REMOVED,
}


def classify_change(change: Change, path: str) -> ChangeKind:
    """Classify a raw filesystem change.

    Only changes to finished session records matter; temp files and
    anything else in the directory are irrelevant.
    """
    if not is_session_file(Path(path)):
        return ChangeKind.IRRELEVANT
    return _KINDS.get(change, ChangeKind.IRRELEVANT)


class SessionWatcher:
    """Watches a store's directory and reloads live sessions on change.

    Usage:
        with SessionWatcher(store) as watcher:
            while True:
                sessions = watcher.poll_changes()
                if sessions is not None:
                    redraw(sessions)
    """

    def __init__(self, store: SessionStore, debounce_ms: int = 100) -> None:
        self.store = store
        self.debounce_ms = debounce_ms
        self._pending: queue.SimpleQueue[set[RawChange]] = queue.SimpleQueue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start watching. Creates the sessions directory if needed."""
        if self._thread is not None:
            return
        self.store.sessions_dir.mkdir(parents=True, exist_ok=True)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="cctop-watcher", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop watching and wait for the background thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def __enter__(self) -> "SessionWatcher":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def _run(self) -> None:
        try:
            for changes in watch(
                self.store.sessions_dir,
                watch_filter=None,
                debounce=self.debounce_ms,
                stop_event=self._stop_event,
                recursive=False,
                raise_interrupt=False,
            ):
                self.notify(changes)
        except OSError as e:
            logger.warning("session watcher stopped", error=str(e))

    def notify(self, changes: set[RawChange]) -> None:
        """Queue a batch of raw changes for the next poll."""
        self._pending.put(changes)

    def has_relevant_changes(self) -> bool:
        """Drain queued changes, returning True if any touched a session."""
        relevant = False
        while True:
            try:
                changes = self._pending.get_nowait()
            except queue.Empty:
                break
            for change, path in changes:
                if classify_change(change, path) is not ChangeKind.IRRELEVANT:
                    relevant = True
        return relevant

    def poll_changes(self) -> list[Session] | None:
        """Return fresh live sessions if anything changed since the last poll.

        Never blocks. Returns None when nothing relevant happened or the
        reload failed.
        """
        if not self.has_relevant_changes():
            return None
        try:
            return load_live_sessions(self.store)
        except OSError as e:
            logger.warning("failed to reload sessions", error=str(e))
            return None
