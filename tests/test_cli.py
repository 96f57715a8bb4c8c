"""Tests for the cctop CLI commands."""

import os
from datetime import timedelta

import orjson
import pytest

from cctop.cli import main
from cctop.core.status import Status


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    """Redirect Claude Code's settings.json into the temp directory."""
    path = tmp_path / "claude" / "settings.json"
    for module in (
        "cctop.hooks.install",
        "cctop.commands.setup",
        "cctop.commands.uninstall",
        "cctop.commands.check",
    ):
        monkeypatch.setattr(f"{module}.get_claude_settings_path", lambda: path)
    return path


def test_help(runner, cctop_home):
    result = runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    for command in ("list", "reset", "cleanup", "dot", "config", "setup", "check"):
        assert command in result.output


# list


def test_list_empty(runner, cctop_home):
    result = runner.invoke(main, ["list"])

    assert result.exit_code == 0
    assert "No active sessions" in result.output


def test_list_shows_live_sessions(runner, store, make_session, dead_pid):
    store.write(make_session("live-session", pid=os.getpid(), status=Status.WORKING))
    store.write(make_session("dead-session", project_path="/p/deadproj", pid=dead_pid))

    result = runner.invoke(main, ["list"])

    assert result.exit_code == 0
    assert "1 session(s)" in result.output
    assert "[WORKING] testproj (main)" in result.output
    assert '"Fix the bug"' in result.output
    assert "deadproj" not in result.output
    assert not store.exists("dead-session")


def test_list_all_keeps_dead_sessions(runner, store, make_session, dead_pid):
    store.write(make_session("dead-session", project_path="/p/deadproj", pid=dead_pid))

    result = runner.invoke(main, ["list", "--all"])

    assert result.exit_code == 0
    assert "deadproj" in result.output
    assert store.exists("dead-session")


def test_list_orders_by_urgency(runner, store, make_session):
    store.write(make_session("a-idle", project_path="/p/idleproj"))
    store.write(
        make_session("b-perm", project_path="/p/permproj", status=Status.WAITING_PERMISSION)
    )

    result = runner.invoke(main, ["list"])

    assert result.output.index("permproj") < result.output.index("idleproj")


# reset


def test_reset_by_prefix(runner, store, make_session):
    store.write(
        make_session(
            "550e8400-e29b",
            status=Status.WAITING_PERMISSION,
            notification_message="Bash: rm",
        )
    )

    result = runner.invoke(main, ["reset", "550e"])

    assert result.exit_code == 0
    assert 'Reset "testproj" to idle' in result.output
    saved = store.read("550e8400-e29b")
    assert saved.status == Status.IDLE
    assert saved.notification_message is None
    assert saved.last_prompt == "Fix the bug"


def test_reset_no_match(runner, store):
    result = runner.invoke(main, ["reset", "nope"])

    assert result.exit_code == 1
    assert 'No session found matching "nope"' in result.output


def test_reset_ambiguous(runner, store, make_session):
    store.write(make_session("abc-1"))
    store.write(make_session("abc-2"))

    result = runner.invoke(main, ["reset", "abc"])

    assert result.exit_code == 1
    assert 'Ambiguous prefix "abc"' in result.output
    assert store.read("abc-1").status == Status.IDLE


# dot


def test_dot(runner, cctop_home):
    result = runner.invoke(main, ["dot"])

    assert result.exit_code == 0
    assert result.output.startswith("digraph cctop {")
    assert "working -> idle" in result.output
    assert result.output.rstrip().endswith("}")


# cleanup


def test_cleanup_removes_old_sessions(runner, store, make_session):
    store.write(make_session("old", age=timedelta(hours=25)))
    store.write(make_session("recent", age=timedelta(hours=1)))

    result = runner.invoke(main, ["cleanup"])

    assert result.exit_code == 0
    assert "Cleaned up 1 stale session(s)" in result.output
    assert [s.session_id for s in store.list_all()] == ["recent"]


def test_cleanup_custom_max_age(runner, store, make_session):
    store.write(make_session("recent", age=timedelta(hours=2)))

    result = runner.invoke(main, ["cleanup", "--max-age-hours", "1"])

    assert result.exit_code == 0
    assert "Cleaned up 1 stale session(s)" in result.output
    assert store.list_all() == []


def test_cleanup_rejects_negative_age(runner, cctop_home):
    result = runner.invoke(main, ["cleanup", "--max-age-hours", "-1"])
    assert result.exit_code == 2


# config


def test_config_defaults(runner, cctop_home):
    result = runner.invoke(main, ["config"])

    assert result.exit_code == 0
    data = orjson.loads(result.output)
    assert data["base_dir"] == str(cctop_home)
    assert data["stale_after_hours"] == 24.0
    assert data["stdin_timeout_seconds"] == 5.0
    assert data["demo"] is False


def test_config_updates_settings(runner, cctop_home):
    result = runner.invoke(main, ["config", "--stale-after-hours", "6"])

    assert result.exit_code == 0
    assert orjson.loads(result.output)["stale_after_hours"] == 6.0
    saved = orjson.loads((cctop_home / "config.json").read_bytes())
    assert saved == {"stale_after_hours": 6.0}


def test_config_setting_used_by_cleanup(runner, store, make_session, cctop_home):
    (cctop_home / "config.json").write_bytes(orjson.dumps({"stale_after_hours": 1}))
    store.write(make_session("two-hours", age=timedelta(hours=2)))

    result = runner.invoke(main, ["cleanup"])

    assert "Cleaned up 1 stale session(s)" in result.output


def test_config_rejects_zero_stdin_timeout(runner, cctop_home):
    result = runner.invoke(main, ["config", "--stdin-timeout-seconds", "0"])

    assert result.exit_code == 2
    assert not (cctop_home / "config.json").exists()


def test_sessions_dir_env_override(runner, tmp_path, monkeypatch, cctop_home):
    sessions_dir = tmp_path / "elsewhere"
    monkeypatch.setenv("CCTOP_SESSIONS_DIR", str(sessions_dir))

    result = runner.invoke(main, ["config"])

    assert orjson.loads(result.output)["sessions_dir"] == str(sessions_dir)


# setup / uninstall / check


def test_setup_installs_hooks(runner, cctop_home, settings_path):
    result = runner.invoke(main, ["setup"])

    assert result.exit_code == 0
    assert (cctop_home / "sessions").is_dir()
    assert (cctop_home / "logs").is_dir()
    settings = orjson.loads(settings_path.read_bytes())
    assert "PreToolUse" in settings["hooks"]
    assert f"Hooks installed to {settings_path}" in result.output


def test_setup_invalid_settings(runner, cctop_home, settings_path):
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text("{broken")

    result = runner.invoke(main, ["setup"])

    assert result.exit_code == 1
    assert "is not valid JSON" in result.output


def test_uninstall_removes_hooks_and_data(runner, cctop_home, settings_path):
    runner.invoke(main, ["setup"])

    result = runner.invoke(main, ["uninstall", "--yes"])

    assert result.exit_code == 0
    assert "hooks" not in orjson.loads(settings_path.read_bytes())
    assert not cctop_home.exists()


def test_uninstall_keep_data(runner, cctop_home, settings_path):
    runner.invoke(main, ["setup"])

    result = runner.invoke(main, ["uninstall", "--keep-data", "-y"])

    assert result.exit_code == 0
    assert (cctop_home / "sessions").is_dir()


def test_uninstall_removes_external_sessions_dir(
    runner, cctop_home, settings_path, tmp_path, monkeypatch
):
    sessions_dir = tmp_path / "elsewhere" / "sessions"
    monkeypatch.setenv("CCTOP_SESSIONS_DIR", str(sessions_dir))
    runner.invoke(main, ["setup"])
    assert sessions_dir.is_dir()

    result = runner.invoke(main, ["uninstall"], input="y\n")

    assert result.exit_code == 0
    assert str(sessions_dir) in result.output
    assert not sessions_dir.exists()
    assert not cctop_home.exists()


def test_uninstall_keep_data_keeps_external_sessions_dir(
    runner, cctop_home, settings_path, tmp_path, monkeypatch
):
    sessions_dir = tmp_path / "elsewhere" / "sessions"
    monkeypatch.setenv("CCTOP_SESSIONS_DIR", str(sessions_dir))
    runner.invoke(main, ["setup"])

    result = runner.invoke(main, ["uninstall", "--keep-data", "-y"])

    assert result.exit_code == 0
    assert sessions_dir.is_dir()


def test_uninstall_aborts_without_confirmation(runner, cctop_home, settings_path):
    runner.invoke(main, ["setup"])

    result = runner.invoke(main, ["uninstall"], input="n\n")

    assert result.exit_code == 1
    assert "PreToolUse" in orjson.loads(settings_path.read_bytes())["hooks"]


def test_check_after_setup(runner, cctop_home, settings_path, monkeypatch):
    monkeypatch.setattr("cctop.commands.check.shutil.which", lambda name: "/usr/bin/cctop-hook")
    runner.invoke(main, ["setup"])

    result = runner.invoke(main, ["check"])

    assert result.exit_code == 0
    assert "All checks passed." in result.output
    assert "no hook logs found" in result.output


def test_check_without_setup(runner, cctop_home, settings_path, monkeypatch):
    monkeypatch.setattr("cctop.commands.check.shutil.which", lambda name: None)

    result = runner.invoke(main, ["check"])

    assert result.exit_code == 1
    assert "hint: run: cctop setup" in result.output
