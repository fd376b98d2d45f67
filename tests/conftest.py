# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskify_sync.cli.bootstrap import create_initial_state
from taskify_sync.core.state import AppState
from taskify_sync.store.shared_store import SharedStore

from .fakes import FakeNotificationSurface, FakeWindows, FakeWindow

TASKS_KEY = "flutter.widget_tasks"
LANGUAGE_KEY = "flutter.app_language"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskify-test",
        data_dir=tmp_path,
        store_path=tmp_path / "shared_prefs.sqlite3",
        store_namespace="FlutterSharedPreferences",
        tasks_key=TASKS_KEY,
        language_key=LANGUAGE_KEY,
        default_language="bg",
        widget_surfaces_dir=tmp_path / "widgets",
        widget_capacity=3,
        widget_refresh_seconds=1800.0,
        notification_title=None,
        notification_body=None,
        notification_tag="task-reminder",
        notification_icon="/icons/Icon-192.png",
        app_url="/",
        console_enabled=True,
        matrix_enabled=False,
    )


@pytest.fixture()
def store(tmp_path: Path) -> SharedStore:
    return SharedStore(tmp_path / "prefs.sqlite3")


@pytest.fixture()
def state(settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch) -> AppState:
    """
    AppState wired with a real SQLite store and file-backed widget host.

    NOTE: the bridge's fire-and-forget thread is replaced by an inline call so
    assertions never race a background render.
    """
    st = create_initial_state(
        settings=settings,
        tray=FakeNotificationSurface(),
        windows=FakeWindows(windows=[FakeWindow(id="main")]),
    )
    monkeypatch.setattr(st.bridge, "request_update", st.bridge.update_widgets)
    return st
