"""Main Textual app for cctop TUI."""

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from cctop.core.config import Config
from cctop.core.liveness import load_live_sessions
from cctop.core.session import GroupedSessions, Session, SessionDecodeError
from cctop.core.state import SessionStore
from cctop.core.watcher import SessionWatcher
from cctop.tui.widgets.session_table import SessionTable

# Seconds between watcher polls
POLL_INTERVAL = 0.5
# Seconds between full reloads; process exits do not touch the directory
RELOAD_INTERVAL = 10.0


class CctopApp(App):
    """cctop TUI application.

    Displays live sessions and refreshes when session files change.
    """

    TITLE = "cctop"
    BINDINGS = [
        ("j", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("r", "refresh", "Refresh"),
        ("R", "reset_session", "Reset to idle"),
        ("q", "quit", "Quit"),
    ]
    CSS = """
    SessionTable {
        height: 1fr;
    }

    #empty-message {
        width: 100%;
        height: 100%;
        content-align: center middle;
        color: $text-muted;
    }
    """

    def __init__(self, config: Config) -> None:
        super().__init__()
        self._store = SessionStore(config)
        self._watcher = SessionWatcher(self._store)

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield SessionTable()
        yield Static("No active sessions", id="empty-message")
        yield Footer()

    def on_mount(self) -> None:
        """Start watching and do the first load."""
        try:
            self._watcher.start()
        except OSError as e:
            self.notify(f"Cannot watch sessions: {e}", severity="error")
        self.action_refresh()
        self.set_interval(POLL_INTERVAL, self._poll_watcher)
        self.set_interval(RELOAD_INTERVAL, self.action_refresh)

    def on_unmount(self) -> None:
        """Stop the watcher thread."""
        self._watcher.stop()

    def _poll_watcher(self) -> None:
        sessions = self._watcher.poll_changes()
        if sessions is not None:
            self.show_sessions(sessions)

    def show_sessions(self, sessions: list[Session]) -> None:
        """Display sessions, or the empty message when there are none."""
        table = self.query_one(SessionTable)
        empty_msg = self.query_one("#empty-message", Static)

        grouped = GroupedSessions.from_sessions(sessions)
        if grouped.has_any():
            table.update_sessions(sessions)
            table.display = True
            empty_msg.display = False
            attention = len(grouped.waiting_permission) + len(grouped.waiting_input)
            self.sub_title = f"{len(grouped.working)} working, {attention} need attention"
        else:
            table.display = False
            empty_msg.display = True
            self.sub_title = "0 sessions"

    def action_refresh(self) -> None:
        """Reload all live sessions."""
        try:
            sessions = load_live_sessions(self._store)
        except OSError as e:
            self.notify(f"Failed to load sessions: {e}", severity="error")
            return
        self.show_sessions(sessions)

    def action_cursor_down(self) -> None:
        self.query_one(SessionTable).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one(SessionTable).action_cursor_up()

    def action_reset_session(self) -> None:
        """Reset the selected session to idle."""
        session_id = self.query_one(SessionTable).selected_session_id()
        if session_id is None:
            self.notify("No session selected", severity="warning")
            return

        try:
            session = self._store.reset(session_id)
        except FileNotFoundError:
            self.notify("Session no longer exists", severity="warning")
        except (SessionDecodeError, OSError) as e:
            self.notify(f"Failed to reset session: {e}", severity="error")
        else:
            self.notify(f"Reset {session.project_name} to idle")
        self.action_refresh()
