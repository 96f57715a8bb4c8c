"""Status transition table for cctop.

Transitions are event-determined: the next status depends only on the event,
never on the current status. `for_event` still takes the current status so
the table reads as a state machine and can be rendered as one.
"""

from cctop.core.status import HookEvent, Status

_TABLE: dict[HookEvent, Status | None] = {
    HookEvent.SESSION_START: Status.IDLE,
    HookEvent.USER_PROMPT_SUBMIT: Status.WORKING,
    HookEvent.PRE_TOOL_USE: Status.WORKING,
    HookEvent.POST_TOOL_USE: Status.WORKING,
    HookEvent.STOP: Status.IDLE,
    HookEvent.NOTIFICATION_IDLE: Status.WAITING_INPUT,
    HookEvent.NOTIFICATION_PERMISSION: Status.WAITING_PERMISSION,
    HookEvent.NOTIFICATION_OTHER: None,
    HookEvent.PERMISSION_REQUEST: Status.WAITING_PERMISSION,
    HookEvent.PRE_COMPACT: Status.COMPACTING,
    # Liveness GC removes ended sessions; SessionEnd is not delivered reliably
    HookEvent.SESSION_END: None,
    HookEvent.UNKNOWN: None,
}


def for_event(current: Status, event: HookEvent) -> Status | None:
    """Look up the status an event moves a session to.

    Args:
        current: The session's current status.
        event: The incoming hook event.

    Returns:
        The new status, or None to keep `current` unchanged.
    """
    return _TABLE.get(event)


def apply(current: Status, event: HookEvent) -> Status:
    """Return the status after `event`, resolving "no change" to `current`."""
    new_status = for_event(current, event)
    return current if new_status is None else new_status


def generate_dot_diagram() -> str:
    """Render the transition table as a Graphviz DOT digraph.

    Solid edges are status changes labeled by event. Dashed self-loops are
    events that preserve the status. Edges sharing endpoints are merged into
    one edge with a multi-line label.
    """
    changes: dict[tuple[Status, Status], list[str]] = {}
    preserved: dict[Status, list[str]] = {}

    for status in Status:
        for event in HookEvent:
            new_status = for_event(status, event)
            if new_status is None:
                preserved.setdefault(status, []).append(event.value)
            elif new_status != status:
                changes.setdefault((status, new_status), []).append(event.value)

    lines = [
        "digraph cctop {",
        "    rankdir=LR;",
        '    node [shape=box, style=rounded, fontname="Helvetica"];',
        '    edge [fontname="Helvetica", fontsize=10];',
        "",
    ]
    for status in Status:
        lines.append(f'    {status.value} [label="{status.label}"];')
    lines.append("")

    for (src, dst), events in changes.items():
        label = "\\n".join(events)
        lines.append(f'    {src.value} -> {dst.value} [label="{label}"];')
    lines.append("")

    for status, events in preserved.items():
        label = "\\n".join(events)
        lines.append(
            f'    {status.value} -> {status.value} [label="{label}", style=dashed];'
        )

    lines.append("}")
    return "\n".join(lines)
