"""Session list widget for cctop TUI."""

from textual.widgets import DataTable

from cctop.core.session import (
    Session,
    context_line,
    format_relative_time,
    sort_sessions,
)


def session_row(session: Session) -> tuple[str, str, str, str, str]:
    """Build the display cells for one session."""
    return (
        f"{session.status.indicator} {session.status.label}",
        session.project_name,
        session.branch,
        context_line(session) or "",
        format_relative_time(session.last_activity),
    )


class SessionTable(DataTable):
    """DataTable widget displaying cctop sessions.

    Columns: Status, Project, Branch, Activity, Updated
    Rows are keyed by session id and ordered most urgent first.
    """

    def on_mount(self) -> None:
        """Set up the table columns on mount."""
        self.add_columns("Status", "Project", "Branch", "Activity", "Updated")
        self.cursor_type = "row"

    def update_sessions(self, sessions: list[Session]) -> None:
        """Replace the table contents, keeping the cursor on the same session."""
        selected = self.selected_session_id()
        self.clear()
        ordered = sort_sessions(sessions)
        for session in ordered:
            self.add_row(*session_row(session), key=session.session_id)
        ids = [s.session_id for s in ordered]
        if selected in ids:
            self.move_cursor(row=ids.index(selected))

    def selected_session_id(self) -> str | None:
        """Get the session id under the cursor, if any."""
        if self.row_count == 0:
            return None
        row_key, _ = self.coordinate_to_cell_key(self.cursor_coordinate)
        return None if row_key.value is None else str(row_key.value)
