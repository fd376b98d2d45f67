# tests/test_widget_host.py

from __future__ import annotations

from pathlib import Path

from taskify_sync.connectors.widget_host import FileWidgetHost
from taskify_sync.tasks.task_models import Language, TaskRecord
from taskify_sync.widget.actions import ACTION_COMPLETE_TASK, ACTION_LAUNCH_APP, Intent
from taskify_sync.widget.view import build_view


def test_place_assigns_ids_and_remove_forgets_them(tmp_path: Path) -> None:
    host = FileWidgetHost(tmp_path / "widgets")

    assert host.placed_surface_ids() == []
    assert host.place_surface() == 1
    assert host.place_surface(5) == 5
    assert host.place_surface() == 6
    assert host.placed_surface_ids() == [1, 5, 6]

    assert host.remove_surface(5) is True
    assert host.remove_surface(5) is False
    assert host.placed_surface_ids() == [1, 6]


def test_update_for_unplaced_surface_is_dropped(tmp_path: Path) -> None:
    host = FileWidgetHost(tmp_path)
    view = build_view([TaskRecord(key=1, title="a")], Language.EN, surface_id=9)

    host.update_surface(9, view)

    assert host.read_surface(9) is None
    assert host.placed_surface_ids() == []


def test_drawn_surface_resolves_taps(tmp_path: Path) -> None:
    host = FileWidgetHost(tmp_path)
    host.place_surface(1)
    assert host.read_surface(1) == {}
    assert host.resolve_tap(1, 0) is None

    view = build_view([TaskRecord(key=7, title="Buy milk")], Language.EN, surface_id=1)
    host.update_surface(1, view)

    drawn = host.read_surface(1)
    assert drawn["title"] == "1 task for today"
    assert drawn["rows"][0]["title"] == "Buy milk"

    check = host.resolve_tap(1, 0)
    assert check is not None
    assert check.action == ACTION_COMPLETE_TASK
    assert check.extras == {"task_key": 7}
    assert check.request_code == 7

    # hidden rows have no target
    assert host.resolve_tap(1, 1) is None
    assert host.resolve_tap(1, None).action == ACTION_LAUNCH_APP


def test_unreadable_surface_has_no_taps(tmp_path: Path) -> None:
    host = FileWidgetHost(tmp_path)
    host.place_surface(2)
    (tmp_path / "2.json").write_text("{not json", "utf-8")

    assert host.read_surface(2) == {}
    assert host.resolve_tap(2, None) is None


def test_broadcast_reaches_receivers_and_survives_crashes(tmp_path: Path) -> None:
    host = FileWidgetHost(tmp_path)
    seen: list[Intent] = []

    def crash(intent: Intent) -> None:
        raise RuntimeError("boom")

    host.register_receiver("x", crash)
    host.register_receiver("x", seen.append)

    host.send_broadcast(Intent(action="x"))
    host.send_broadcast(Intent(action="nobody-listens"))

    assert seen == [Intent(action="x")]
