"""Session status and hook event enums for cctop.

Both sets are closed. Anything unrecognized read from disk or received from
a hook maps onto a reserved variant instead of raising:

- Status.NEEDS_ATTENTION: unknown status strings in session files
- HookEvent.UNKNOWN: unknown hook event names
"""

from enum import Enum


class Status(str, Enum):
    """Externally visible state of a session."""

    IDLE = "idle"
    WORKING = "working"
    COMPACTING = "compacting"
    WAITING_PERMISSION = "waiting_permission"
    WAITING_INPUT = "waiting_input"
    # Fallback for future or legacy values, grouped with WAITING_INPUT
    NEEDS_ATTENTION = "needs_attention"

    @classmethod
    def parse(cls, raw: object) -> "Status":
        """Parse a status string, falling back to NEEDS_ATTENTION."""
        try:
            return cls(raw)
        except ValueError:
            return cls.NEEDS_ATTENTION

    @property
    def indicator(self) -> str:
        return _INDICATORS[self]

    @property
    def sort_priority(self) -> int:
        """Lower sorts first (more urgent)."""
        return _PRIORITIES[self]

    @property
    def needs_attention(self) -> bool:
        return self in (
            Status.WAITING_PERMISSION,
            Status.WAITING_INPUT,
            Status.NEEDS_ATTENTION,
        )

    @property
    def label(self) -> str:
        """Human-readable label, e.g. "waiting permission"."""
        return self.value.replace("_", " ")


_INDICATORS = {
    Status.IDLE: "·",
    Status.WORKING: "◉",
    Status.COMPACTING: "◉",
    Status.WAITING_PERMISSION: "→",
    Status.WAITING_INPUT: "→",
    Status.NEEDS_ATTENTION: "→",
}

_PRIORITIES = {
    Status.WAITING_PERMISSION: 0,
    Status.WAITING_INPUT: 1,
    Status.NEEDS_ATTENTION: 1,
    Status.WORKING: 2,
    Status.COMPACTING: 2,
    Status.IDLE: 3,
}


class HookEvent(str, Enum):
    """Lifecycle signal delivered by a coding-assistant hook."""

    SESSION_START = "SessionStart"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    STOP = "Stop"
    NOTIFICATION_IDLE = "Notification:idle"
    NOTIFICATION_PERMISSION = "Notification:permission"
    NOTIFICATION_OTHER = "Notification:other"
    PERMISSION_REQUEST = "PermissionRequest"
    PRE_COMPACT = "PreCompact"
    SESSION_END = "SessionEnd"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, hook_name: str, notification_type: str | None = None) -> "HookEvent":
        """Map a hook name (and notification sub-type) to an event.

        Args:
            hook_name: Event name as sent by the hook, e.g. "PreToolUse".
            notification_type: Only consulted for "Notification" events.

        Returns:
            The matching event, or UNKNOWN. Never raises.
        """
        if hook_name == "Notification":
            if notification_type == "idle_prompt":
                return cls.NOTIFICATION_IDLE
            if notification_type == "permission_prompt":
                return cls.NOTIFICATION_PERMISSION
            return cls.NOTIFICATION_OTHER
        if hook_name.startswith("Notification:"):
            return cls.UNKNOWN
        try:
            return cls(hook_name)
        except ValueError:
            return cls.UNKNOWN

    @property
    def hook_name(self) -> str:
        """Name of the hook this event is delivered on."""
        return self.value.split(":", 1)[0]

    @property
    def is_notification(self) -> bool:
        return self in (
            HookEvent.NOTIFICATION_IDLE,
            HookEvent.NOTIFICATION_PERMISSION,
            HookEvent.NOTIFICATION_OTHER,
        )


# Hook names registered with the agent, in delivery order of a typical turn
HOOK_NAMES = [
    "SessionStart",
    "UserPromptSubmit",
    "PreToolUse",
    "PostToolUse",
    "PermissionRequest",
    "Notification",
    "PreCompact",
    "Stop",
    "SessionEnd",
]
