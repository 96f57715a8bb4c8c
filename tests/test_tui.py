"""Tests for the cctop TUI."""

import os

import pytest

from cctop.core.status import Status
from cctop.tui.app import CctopApp
from cctop.tui.widgets.session_table import SessionTable, session_row


def test_session_row(make_session):
    session = make_session(status=Status.WORKING, last_tool="Bash", last_tool_detail="npm test")

    status, project, branch, activity, updated = session_row(session)

    assert status == "◉ working"
    assert project == "testproj"
    assert branch == "main"
    assert "npm test" in activity
    assert updated.endswith("s ago")


@pytest.mark.asyncio
async def test_app_shows_empty_message(store, config):
    app = CctopApp(config)
    async with app.run_test():
        assert app.query_one(SessionTable).display is False
        assert app.sub_title == "0 sessions"


@pytest.mark.asyncio
async def test_app_displays_sessions(store, config, make_session):
    store.write(make_session("one", pid=os.getpid(), status=Status.WORKING))
    store.write(make_session("two", status=Status.WAITING_PERMISSION))

    app = CctopApp(config)
    async with app.run_test():
        table = app.query_one(SessionTable)
        assert table.display is True
        assert table.row_count == 2
        # Most urgent first
        assert table.selected_session_id() == "two"
        assert app.sub_title == "1 working, 1 need attention"


@pytest.mark.asyncio
async def test_app_hides_dead_sessions(store, config, make_session, dead_pid):
    store.write(make_session("dead", pid=dead_pid))

    app = CctopApp(config)
    async with app.run_test():
        assert app.query_one(SessionTable).display is False
    assert not store.exists("dead")


@pytest.mark.asyncio
async def test_refresh_picks_up_new_sessions(store, config, make_session):
    app = CctopApp(config)
    async with app.run_test() as pilot:
        store.write(make_session("late"))
        await pilot.press("r")
        await pilot.pause()
        assert app.query_one(SessionTable).row_count == 1


@pytest.mark.asyncio
async def test_reset_selected_session(store, config, make_session):
    store.write(make_session("stuck", status=Status.WAITING_PERMISSION, notification_message="Bash"))

    app = CctopApp(config)
    async with app.run_test() as pilot:
        app.action_reset_session()
        await pilot.pause()

    saved = store.read("stuck")
    assert saved.status == Status.IDLE
    assert saved.notification_message is None


@pytest.mark.asyncio
async def test_quit_binding(store, config):
    app = CctopApp(config)
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert not app.is_running
