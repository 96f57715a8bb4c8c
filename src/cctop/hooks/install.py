"""Hook installation for Claude Code integration.

Registers `cctop-hook <HookName>` for every lifecycle hook in Claude Code's
settings.json, leaving any other hooks untouched.
"""

from pathlib import Path

import orjson

from cctop.core.status import HOOK_NAMES

HOOK_COMMAND = "cctop-hook"


def _hook_entry(hook_name: str) -> dict:
    return {
        "matcher": "*",
        "hooks": [{"type": "command", "command": f"{HOOK_COMMAND} {hook_name}"}],
    }


HOOK_CONFIG = {name: [_hook_entry(name)] for name in HOOK_NAMES}


def get_claude_settings_path() -> Path:
    """Get the path to Claude Code's settings.json."""
    return Path.home() / ".claude" / "settings.json"


def _read_settings(settings_path: Path) -> dict:
    if not settings_path.exists():
        return {}
    content = settings_path.read_bytes()
    return orjson.loads(content) if content else {}


def _is_cctop_entry(entry: object) -> bool:
    if not isinstance(entry, dict):
        return False
    return any(
        isinstance(hook, dict)
        and str(hook.get("command", "")).startswith(HOOK_COMMAND)
        for hook in entry.get("hooks", [])
    )


def install_hooks(settings_path: Path | None = None) -> None:
    """Install cctop hooks into Claude Code settings.

    This function:
    1. Reads existing ~/.claude/settings.json (creates if missing)
    2. Adds a cctop-hook entry for each hook name that lacks one
    3. Writes the updated settings back

    Raises:
        orjson.JSONDecodeError: If the existing settings are not valid JSON.
    """
    settings_path = settings_path or get_claude_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    settings = _read_settings(settings_path)
    hooks = settings.get("hooks", {})

    for event, event_hooks in HOOK_CONFIG.items():
        entries = hooks.setdefault(event, [])
        if any(_is_cctop_entry(entry) for entry in entries):
            continue
        entries.extend(event_hooks)

    settings["hooks"] = hooks
    settings_path.write_bytes(orjson.dumps(settings, option=orjson.OPT_INDENT_2))


def uninstall_hooks(settings_path: Path | None = None) -> None:
    """Remove cctop hooks from Claude Code settings.

    Only cctop-hook entries are removed; other hooks stay intact.
    """
    settings_path = settings_path or get_claude_settings_path()
    if not settings_path.exists():
        return

    settings = _read_settings(settings_path)
    if not settings:
        return
    hooks = settings.get("hooks", {})

    for event in list(hooks):
        hooks[event] = [h for h in hooks[event] if not _is_cctop_entry(h)]
        # Remove empty event entries
        if not hooks[event]:
            del hooks[event]

    if hooks:
        settings["hooks"] = hooks
    elif "hooks" in settings:
        del settings["hooks"]

    settings_path.write_bytes(orjson.dumps(settings, option=orjson.OPT_INDENT_2))


def hooks_installed(settings_path: Path | None = None) -> bool:
    """Check whether every hook has a cctop-hook entry."""
    settings_path = settings_path or get_claude_settings_path()
    try:
        hooks = _read_settings(settings_path).get("hooks", {})
    except (orjson.JSONDecodeError, OSError):
        return False
    return all(
        any(_is_cctop_entry(entry) for entry in hooks.get(event, []))
        for event in HOOK_CONFIG
    )
