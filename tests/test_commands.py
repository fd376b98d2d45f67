# tests/test_commands.py

from __future__ import annotations

import json

import pytest

from taskify_sync.cli.commands import CommandRegistry, registry
from taskify_sync.core.state import AppState

from .conftest import TASKS_KEY


def test_registry_routes_two_and_three_arg_handlers() -> None:
    reg = CommandRegistry()
    emitted: list[str] = []

    def two(state, args):
        return f"two:{','.join(args)}"

    def three(state, args, emit):
        emit("side")
        return "three"

    reg.register("two", two, help_text="2 params", aliases=["t"])
    reg.register("three", three, help_text="3 params")

    assert reg.handle(None, "/two a b") == "two:a,b"
    assert reg.handle(None, "/T x") == "two:x"
    assert reg.handle(None, "/three", emitted.append) == "three"
    assert emitted == ["side"]

    assert reg.handle(None, "plain text") is None
    assert reg.handle(None, "/").startswith("Empty command")
    assert reg.handle(None, "/nope").startswith("Unknown command: /nope")
    assert "/two - 2 params" in reg.build_help()


def test_task_commands(state: AppState) -> None:
    assert registry.handle(state, "/tasks") == "No tasks."
    assert registry.handle(state, "/add Buy milk") == "Added task 1: Buy milk"
    assert registry.handle(state, "/add") == "Usage: /add <title>"
    assert registry.handle(state, "/done 1") == "Task 1 completed."
    assert registry.handle(state, "/done 9") == "No task with key 9."
    assert "[x] 1: Buy milk" in registry.handle(state, "/ls")
    assert registry.handle(state, "/undo 1") == "Task 1 reopened."
    assert registry.handle(state, "/rm 1") == "Task 1 removed."

    with pytest.raises(ValueError):
        registry.handle(state, "/done one")


def test_language_command(state: AppState) -> None:
    assert registry.handle(state, "/lang").startswith("Language is bg")
    assert registry.handle(state, "/lang en") == "Language set to en."
    assert registry.handle(state, "/lang fr").startswith("Unsupported language 'fr'")
    assert state.renderer.read_language().value == "en"


def test_widget_tap_completes_task_and_sync_picks_it_up(state: AppState) -> None:
    registry.handle(state, "/add Buy milk")
    registry.handle(state, "/add Call mom")
    assert registry.handle(state, "/place") == "Widget 1 placed."

    drawn = registry.handle(state, "/widgets")
    assert "2 задачи за деня" in drawn
    assert "[1] ☐ Buy milk" in drawn

    after = registry.handle(state, "/tap 1 1")
    assert "1 задача за деня" in after
    assert "Buy milk" not in after

    snapshot = json.loads(state.store.get_string(TASKS_KEY))
    assert snapshot[0]["completedFromWidget"] is True

    assert registry.handle(state, "/sync") == "Picked up widget completions: 1 (Buy milk)"
    assert registry.handle(state, "/sync") == "No widget completions to pick up."

    assert registry.handle(state, "/tap 1 3").startswith("Nothing to tap")

    emitted: list[str] = []
    assert registry.handle(state, "/open 1", emitted.append) == "App opened."
    assert emitted == ["[APP] launching main application"]


def test_app_change_redraws_placed_widget(state: AppState) -> None:
    registry.handle(state, "/place 4")
    assert state.widget_host.read_surface(4)["empty_visible"] is True

    registry.handle(state, "/add Water plants")

    drawn = state.widget_host.read_surface(4)
    assert drawn["empty_visible"] is False
    assert drawn["rows"][0]["title"] == "Water plants"
    assert registry.handle(state, "/refresh") == "updateWidget -> success"


def test_push_and_click(state: AppState) -> None:
    assert registry.handle(state, "/click") == "No notifications to click."

    reply = registry.handle(state, '/push {"notification": {"title": "Milk"}, "data": {"taskId": "5"}}')
    assert reply == "Notification shown (tag=5)."
    assert state.tray.shown[-1].title == "Milk"

    assert registry.handle(state, "/click 99") == "No notification with tag '99'."
    assert registry.handle(state, "/click") == "Notification 5: focused."
    assert state.tray.closed == ["5"]
    assert state.windows.focused == ["main"]


def test_prefs_lists_and_removes_store_keys(state: AppState) -> None:
    assert registry.handle(state, "/prefs") == "No keys in FlutterSharedPreferences."

    registry.handle(state, "/place 1")
    registry.handle(state, "/add Buy milk")
    registry.handle(state, "/lang en")

    listing = registry.handle(state, "/prefs")
    assert "flutter.app_language (2 chars)" in listing
    assert TASKS_KEY in listing
    assert "2 key(s)" in registry.handle(state, "/status")

    assert registry.handle(state, "/prefs rm") == "Usage: /prefs rm <key>"
    assert registry.handle(state, "/prefs rm nope") == "No key 'nope' in FlutterSharedPreferences."

    # dropping the snapshot redraws the widget as empty
    assert registry.handle(state, f"/prefs rm {TASKS_KEY}") == f"Removed {TASKS_KEY!r}."
    assert state.store.keys() == ["flutter.app_language"]
    assert state.widget_host.read_surface(1)["empty_visible"] is True
    assert state.widget_host.read_surface(1)["empty_text"] == "All done!"
