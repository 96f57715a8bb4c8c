"""Session dataclass and on-disk codec for cctop.

A session file is a pretty-printed JSON object:

    {
      "session_id": "550e8400-...",
      "project_path": "/Users/me/projects/irb",
      "project_name": "irb",
      "branch": "main",
      "status": "working",
      "last_prompt": "Fix the bug",
      "last_activity": "2026-01-25T22:48:00.123456Z",
      "started_at": "2026-01-25T22:30:00Z",
      "terminal": {"program": "iTerm.app", "session_id": null, "tty": null},
      "pid": 12345,
      "last_tool": "Bash",
      "last_tool_detail": "npm test",
      "notification_message": null,
      "context_compacted": false
    }

Fields added after the first schema (pid, last_tool, last_tool_detail,
notification_message, context_compacted) are optional when reading.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import PurePath

import orjson

from cctop.core.status import Status

UNKNOWN_BRANCH = "unknown"


class SessionDecodeError(ValueError):
    """Raised when a session record cannot be parsed."""

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TerminalInfo:
    """Terminal the session runs in, used to focus its window.

    Attributes:
        program: Terminal program name (e.g., "iTerm.app", "vscode", "kitty")
        session_id: Terminal-native session id (iTerm2 or kitty), if any
        tty: TTY path (e.g., "/dev/ttys003"), if known
    """

    program: str = ""
    session_id: str | None = None
    tty: str | None = None

    def to_dict(self) -> dict:
        return {"program": self.program, "session_id": self.session_id, "tty": self.tty}

    @classmethod
    def from_dict(cls, data: object) -> "TerminalInfo":
        if not isinstance(data, dict):
            return cls()
        return cls(
            program=_optional_str(data.get("program")) or "",
            session_id=_optional_str(data.get("session_id")),
            tty=_optional_str(data.get("tty")),
        )


@dataclass
class Session:
    """Persisted lifecycle record of one coding-assistant process.

    Attributes:
        session_id: Sanitized identifier supplied by the hook
        project_path: Working directory the session was started in
        project_name: Last component of project_path
        branch: Git branch, refreshed on every event ("unknown" if unavailable)
        status: Current status
        last_prompt: Last prompt submitted by the user
        last_activity: Timestamp of the last event
        started_at: Timestamp the record was created, never changed
        terminal: Terminal context, refreshed on every event
        pid: Owning process id, captured at SessionStart
        last_tool: Tool in flight (PreToolUse), cleared when leaving tool context
        last_tool_detail: Most relevant tool input (command, path, pattern, ...)
        notification_message: Message from PermissionRequest or Notification
    """

    session_id: str
    project_path: str
    project_name: str = ""
    branch: str = UNKNOWN_BRANCH
    status: Status = Status.IDLE
    last_prompt: str | None = None
    last_activity: datetime = field(default_factory=utc_now)
    started_at: datetime = field(default_factory=utc_now)
    terminal: TerminalInfo = field(default_factory=TerminalInfo)
    pid: int | None = None
    last_tool: str | None = None
    last_tool_detail: str | None = None
    notification_message: str | None = None

    def __post_init__(self) -> None:
        if not self.project_name:
            self.project_name = extract_project_name(self.project_path)

    @classmethod
    def new(
        cls,
        session_id: str,
        project_path: str,
        branch: str = UNKNOWN_BRANCH,
        terminal: TerminalInfo | None = None,
    ) -> "Session":
        """Create a fresh idle session stamped with the current time."""
        now = utc_now()
        return cls(
            session_id=session_id,
            project_path=project_path,
            branch=branch,
            terminal=terminal or TerminalInfo(),
            last_activity=now,
            started_at=now,
        )

    @property
    def context_compacted(self) -> bool:
        """Whether the session is compacting its context."""
        return self.status == Status.COMPACTING

    def clear_transient(self) -> None:
        """Drop tool and notification state."""
        self.last_tool = None
        self.last_tool_detail = None
        self.notification_message = None

    def reset(self) -> None:
        """Force the session back to idle, keeping identity and prompt."""
        self.status = Status.IDLE
        self.clear_transient()
        self.last_activity = utc_now()

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "project_path": self.project_path,
            "project_name": self.project_name,
            "branch": self.branch,
            "status": self.status.value,
            "last_prompt": self.last_prompt,
            "last_activity": format_timestamp(self.last_activity),
            "started_at": format_timestamp(self.started_at),
            "terminal": self.terminal.to_dict(),
            "pid": self.pid,
            "last_tool": self.last_tool,
            "last_tool_detail": self.last_tool_detail,
            "notification_message": self.notification_message,
            # Kept for readers that predate the compacting status
            "context_compacted": self.context_compacted,
        }

    @classmethod
    def from_dict(cls, data: object) -> "Session":
        """Build a session from a decoded JSON object.

        Raises:
            SessionDecodeError: If a required field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise SessionDecodeError("session record is not a JSON object")

        session_id = data.get("session_id")
        project_path = data.get("project_path")
        if not isinstance(session_id, str) or not session_id:
            raise SessionDecodeError("missing session_id")
        if not isinstance(project_path, str):
            raise SessionDecodeError("missing project_path")

        pid = data.get("pid")
        if not isinstance(pid, int) or isinstance(pid, bool) or pid <= 0:
            pid = None

        return cls(
            session_id=session_id,
            project_path=project_path,
            project_name=_optional_str(data.get("project_name")) or "",
            branch=_optional_str(data.get("branch")) or UNKNOWN_BRANCH,
            status=Status.parse(data.get("status")),
            last_prompt=_optional_str(data.get("last_prompt")),
            last_activity=parse_timestamp(data.get("last_activity"), "last_activity"),
            started_at=parse_timestamp(data.get("started_at"), "started_at"),
            terminal=TerminalInfo.from_dict(data.get("terminal")),
            pid=pid,
            last_tool=_optional_str(data.get("last_tool")),
            last_tool_detail=_optional_str(data.get("last_tool_detail")),
            notification_message=_optional_str(data.get("notification_message")),
        )

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2)

    @classmethod
    def from_json(cls, content: bytes | str) -> "Session":
        """Parse a session from JSON text.

        Raises:
            SessionDecodeError: If the content is not a valid session record.
        """
        try:
            data = orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise SessionDecodeError(f"invalid JSON: {e}") from e
        return cls.from_dict(data)


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with a "Z" suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: object, name: str = "timestamp") -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given.

    Raises:
        SessionDecodeError: If the value is missing or not a timestamp.
    """
    if not isinstance(value, str):
        raise SessionDecodeError(f"missing {name}")
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise SessionDecodeError(f"invalid {name}: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def extract_project_name(path: str) -> str:
    """Return the last component of a path, or "unknown" for the root."""
    name = PurePath(path).name
    return name or "unknown"


def truncate_prompt(prompt: str, max_len: int) -> str:
    """Collapse whitespace and cut to max_len, ending with "..." if cut."""
    normalized = " ".join(prompt.split())
    if len(normalized) <= max_len:
        return normalized
    if max_len <= 3:
        return "..."
    return normalized[: max_len - 3] + "..."


def format_relative_time(dt: datetime, now: datetime | None = None) -> str:
    """Format a timestamp relative to now (e.g., "12s ago", "5m ago")."""
    now = now or utc_now()
    seconds = int((now - dt).total_seconds())
    if seconds < 0:
        return "just now"
    if seconds >= 86400:
        return f"{seconds // 86400}d ago"
    if seconds >= 3600:
        return f"{seconds // 3600}h ago"
    if seconds >= 60:
        return f"{seconds // 60}m ago"
    return f"{seconds}s ago"


_TOOL_ACTIONS = {
    "Bash": "Running: ",
    "Grep": "Searching: ",
    "Glob": "Finding: ",
    "WebFetch": "Fetching: ",
    "WebSearch": "Searching: ",
    "Task": "Task: ",
}

_FILE_ACTIONS = {"Edit": "Editing", "Write": "Writing", "Read": "Reading"}


def format_tool_display(tool: str, detail: str | None, max_len: int = 60) -> str:
    """Describe a tool invocation for display.

    Examples:
        Bash + "npm test" -> "Running: npm test"
        Edit + "/src/main.py" -> "Editing main.py"
        Other + None -> "Other..."
    """
    if detail is None:
        result = f"{tool}..."
    elif tool in _FILE_ACTIONS:
        result = f"{_FILE_ACTIONS[tool]} {PurePath(detail).name or detail}"
    elif tool in _TOOL_ACTIONS:
        result = _TOOL_ACTIONS[tool] + detail
    else:
        result = f"{tool}: {detail}"

    if len(result) <= max_len:
        return result
    if max_len <= 3:
        return "..."
    return result[: max_len - 3] + "..."


def context_line(session: Session) -> str | None:
    """One-line summary of what a session is doing, if anything."""
    if session.status == Status.IDLE:
        return None
    if session.status == Status.COMPACTING:
        return "Compacting context..."
    if session.status == Status.WAITING_PERMISSION:
        return session.notification_message or "Permission needed"
    if session.status == Status.WORKING and session.last_tool:
        return format_tool_display(session.last_tool, session.last_tool_detail)
    if session.last_prompt:
        return f'"{truncate_prompt(session.last_prompt, 36)}"'
    return None


def sort_sessions(sessions: list[Session]) -> list[Session]:
    """Sort by status priority, most recent activity first within a status."""
    return sorted(
        sessions,
        key=lambda s: (s.status.sort_priority, -s.last_activity.timestamp()),
    )


@dataclass
class GroupedSessions:
    """Sessions bucketed by status for display."""

    waiting_permission: list[Session] = field(default_factory=list)
    waiting_input: list[Session] = field(default_factory=list)
    working: list[Session] = field(default_factory=list)
    idle: list[Session] = field(default_factory=list)

    @classmethod
    def from_sessions(cls, sessions: list[Session]) -> "GroupedSessions":
        grouped = cls()
        for session in sessions:
            priority = session.status.sort_priority
            if priority == 0:
                grouped.waiting_permission.append(session)
            elif priority == 1:
                grouped.waiting_input.append(session)
            elif priority == 2:
                grouped.working.append(session)
            else:
                grouped.idle.append(session)
        return grouped

    def has_any(self) -> bool:
        return bool(
            self.waiting_permission or self.waiting_input or self.working or self.idle
        )

    def groups(self) -> list[tuple[str, list[Session]]]:
        """Return (title, sessions) pairs in priority order."""
        return [
            ("Waiting for permission", self.waiting_permission),
            ("Waiting for input", self.waiting_input),
            ("Working", self.working),
            ("Idle", self.idle),
        ]
