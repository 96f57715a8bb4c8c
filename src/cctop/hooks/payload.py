"""Hook payload parsing for cctop.

The agent sends one JSON object on stdin per hook invocation. Only the
fields below are read; anything else is ignored.
"""

from dataclasses import dataclass, field

import orjson

# Maximum length of an extracted tool detail, including the "..." marker
MAX_TOOL_DETAIL_LEN = 120

# Tool name -> tool_input field that best describes the call
TOOL_DETAIL_FIELDS = {
    "Bash": "command",
    "Edit": "file_path",
    "Write": "file_path",
    "Read": "file_path",
    "Grep": "pattern",
    "Glob": "pattern",
    "WebFetch": "url",
    "WebSearch": "query",
    "Task": "description",
}


class PayloadError(ValueError):
    """Raised when a hook payload is unusable."""

    pass


def extract_tool_detail(tool_name: str, tool_input: dict[str, object]) -> str | None:
    """Pick the most relevant input field for a tool call.

    Examples:
        ("Bash", {"command": "npm test"}) -> "npm test"
        ("Edit", {"file_path": "/src/main.py", ...}) -> "/src/main.py"
        ("UnknownTool", {...}) -> None
    """
    field_name = TOOL_DETAIL_FIELDS.get(tool_name)
    if field_name is None:
        return None
    value = tool_input.get(field_name)
    if not isinstance(value, str) or not value:
        return None
    if len(value) > MAX_TOOL_DETAIL_LEN:
        return value[: MAX_TOOL_DETAIL_LEN - 3] + "..."
    return value


def _opt_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


@dataclass
class HookInput:
    """Typed view of a hook payload.

    Attributes:
        session_id: Raw (unsanitized) session id from the agent
        cwd: Project directory
        hook_event_name: Event name as reported in the payload
        transcript_path: Conversation transcript (unused, kept for logs)
        prompt: UserPromptSubmit only
        tool_name: PreToolUse, PostToolUse and PermissionRequest
        tool_input: Tool arguments, same events as tool_name
        notification_type: Notification only ("idle_prompt", "permission_prompt", ...)
        message: Notification and PermissionRequest
        title: PermissionRequest
        source: SessionStart trigger ("startup", "resume", ...)
    """

    session_id: str
    cwd: str
    hook_event_name: str = ""
    transcript_path: str | None = None
    prompt: str | None = None
    tool_name: str | None = None
    tool_input: dict[str, object] = field(default_factory=dict)
    notification_type: str | None = None
    message: str | None = None
    title: str | None = None
    source: str | None = None

    @classmethod
    def from_dict(cls, data: object) -> "HookInput":
        """Build a HookInput from decoded JSON.

        Raises:
            PayloadError: If the payload is not an object or lacks
                session_id/cwd.
        """
        if not isinstance(data, dict):
            raise PayloadError("payload is not a JSON object")
        session_id = _opt_str(data, "session_id")
        cwd = _opt_str(data, "cwd")
        if not session_id:
            raise PayloadError("payload missing session_id")
        if cwd is None:
            raise PayloadError("payload missing cwd")

        tool_input = data.get("tool_input")
        return cls(
            session_id=session_id,
            cwd=cwd,
            hook_event_name=_opt_str(data, "hook_event_name") or "",
            transcript_path=_opt_str(data, "transcript_path"),
            prompt=_opt_str(data, "prompt"),
            tool_name=_opt_str(data, "tool_name"),
            tool_input=tool_input if isinstance(tool_input, dict) else {},
            notification_type=_opt_str(data, "notification_type"),
            message=_opt_str(data, "message"),
            title=_opt_str(data, "title"),
            source=_opt_str(data, "source") or _opt_str(data, "trigger"),
        )

    @classmethod
    def from_json(cls, content: bytes | str) -> "HookInput":
        """Parse a HookInput from raw stdin.

        Raises:
            PayloadError: If the content is empty, not JSON, or incomplete.
        """
        if not content or not content.strip():
            raise PayloadError("empty payload")
        try:
            data = orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise PayloadError(f"invalid JSON: {e}") from e
        return cls.from_dict(data)

    @property
    def tool_detail(self) -> str | None:
        if self.tool_name is None:
            return None
        return extract_tool_detail(self.tool_name, self.tool_input)

    def permission_message(self) -> str | None:
        """Describe a pending permission: explicit title, else "tool: detail"."""
        if self.title:
            return self.title
        if self.tool_name is None:
            return None
        detail = self.tool_detail
        return f"{self.tool_name}: {detail}" if detail else self.tool_name
