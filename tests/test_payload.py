"""Tests for hook payload parsing."""

import pytest

from cctop.hooks.payload import (
    MAX_TOOL_DETAIL_LEN,
    HookInput,
    PayloadError,
    extract_tool_detail,
)


@pytest.mark.parametrize(
    ("tool", "tool_input", "expected"),
    [
        ("Bash", {"command": "npm test"}, "npm test"),
        ("Edit", {"file_path": "/src/main.py", "old_string": "a"}, "/src/main.py"),
        ("Read", {"file_path": "/etc/hosts"}, "/etc/hosts"),
        ("Grep", {"pattern": "TODO"}, "TODO"),
        ("WebFetch", {"url": "https://example.com"}, "https://example.com"),
        ("Task", {"description": "explore repo"}, "explore repo"),
        ("UnknownTool", {"command": "x"}, None),
        ("Bash", {}, None),
        ("Bash", {"command": 42}, None),
        ("Bash", {"command": ""}, None),
    ],
)
def test_extract_tool_detail(tool, tool_input, expected):
    assert extract_tool_detail(tool, tool_input) == expected


def test_extract_tool_detail_truncates():
    detail = extract_tool_detail("Bash", {"command": "x" * 500})

    assert len(detail) == MAX_TOOL_DETAIL_LEN
    assert detail.endswith("...")


def test_from_json_minimal():
    hook_input = HookInput.from_json('{"session_id": "abc", "cwd": "/tmp/proj"}')

    assert hook_input.session_id == "abc"
    assert hook_input.cwd == "/tmp/proj"
    assert hook_input.prompt is None
    assert hook_input.tool_input == {}


def test_from_json_full_tool_payload():
    hook_input = HookInput.from_json(
        b'{"session_id": "abc", "cwd": "/p", "hook_event_name": "PreToolUse",'
        b' "tool_name": "Bash", "tool_input": {"command": "ls -la"},'
        b' "unexpected": [1, 2, 3]}'
    )

    assert hook_input.hook_event_name == "PreToolUse"
    assert hook_input.tool_name == "Bash"
    assert hook_input.tool_detail == "ls -la"


def test_from_json_ignores_wrong_types():
    hook_input = HookInput.from_json(
        '{"session_id": "abc", "cwd": "/p", "prompt": 5, "tool_input": "nope"}'
    )

    assert hook_input.prompt is None
    assert hook_input.tool_input == {}


def test_source_falls_back_to_trigger():
    hook_input = HookInput.from_dict({"session_id": "a", "cwd": "/p", "trigger": "auto"})
    assert hook_input.source == "auto"


@pytest.mark.parametrize(
    "content",
    [
        "",
        "   \n",
        "not json",
        "[1, 2]",
        '{"cwd": "/p"}',
        '{"session_id": "", "cwd": "/p"}',
        '{"session_id": "abc"}',
    ],
)
def test_from_json_rejects_bad_payloads(content):
    with pytest.raises(PayloadError):
        HookInput.from_json(content)


def test_payload_error_is_value_error():
    assert issubclass(PayloadError, ValueError)


def test_permission_message_prefers_title():
    hook_input = HookInput(
        session_id="a",
        cwd="/p",
        tool_name="Bash",
        tool_input={"command": "rm -rf build"},
        title="Allow Bash?",
    )
    assert hook_input.permission_message() == "Allow Bash?"


def test_permission_message_from_tool():
    hook_input = HookInput(
        session_id="a", cwd="/p", tool_name="Bash", tool_input={"command": "rm -rf build"}
    )
    assert hook_input.permission_message() == "Bash: rm -rf build"


def test_permission_message_tool_without_detail():
    hook_input = HookInput(session_id="a", cwd="/p", tool_name="Mystery")
    assert hook_input.permission_message() == "Mystery"


def test_permission_message_without_tool():
    assert HookInput(session_id="a", cwd="/p").permission_message() is None
