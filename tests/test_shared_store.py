# tests/test_shared_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskify_sync.errors import StoreError
from taskify_sync.store.shared_store import SharedStore


def test_put_get_replace_remove(tmp_path: Path) -> None:
    store = SharedStore(tmp_path / "prefs.sqlite3")

    assert store.get_string("flutter.widget_tasks") is None
    assert store.get_string("flutter.widget_tasks", "[]") == "[]"

    store.put_string("flutter.widget_tasks", '[{"key":1}]')
    store.put_string("flutter.widget_tasks", '[{"key":2}]')
    assert store.get_string("flutter.widget_tasks") == '[{"key":2}]'
    assert store.contains("flutter.widget_tasks")

    store.put_string("flutter.app_language", "en")
    assert store.keys() == ["flutter.app_language", "flutter.widget_tasks"]

    store.remove("flutter.widget_tasks")
    assert not store.contains("flutter.widget_tasks")


def test_separate_instances_see_each_others_writes(tmp_path: Path) -> None:
    db = tmp_path / "prefs.sqlite3"
    app_side = SharedStore(db)
    widget_side = SharedStore(db)

    app_side.put_string("flutter.widget_tasks", "[]")
    assert widget_side.get_string("flutter.widget_tasks") == "[]"

    widget_side.put_string("flutter.widget_tasks", '[{"key":1}]')
    assert app_side.get_string("flutter.widget_tasks") == '[{"key":1}]'


def test_last_writer_wins(tmp_path: Path) -> None:
    db = tmp_path / "prefs.sqlite3"
    a = SharedStore(db)
    b = SharedStore(db)

    before = a.get_string("k", "[]")
    b.put_string("k", "from-b")
    a.put_string("k", before + "-from-a")

    # b's write is gone: whole-value replace, no merge
    assert b.get_string("k") == "[]-from-a"


def test_namespaces_are_isolated(tmp_path: Path) -> None:
    db = tmp_path / "prefs.sqlite3"
    flutter = SharedStore(db, namespace="FlutterSharedPreferences")
    other = SharedStore(db, namespace="Other")

    flutter.put_string("k", "v")
    assert other.get_string("k") is None


def test_values_must_be_text(tmp_path: Path) -> None:
    store = SharedStore(tmp_path / "prefs.sqlite3")
    with pytest.raises(TypeError):
        store.put_string("k", 1)  # type: ignore[arg-type]


def test_unopenable_database_raises_store_error(tmp_path: Path) -> None:
    # A directory where the database file should be.
    bad = tmp_path / "prefs.sqlite3"
    bad.mkdir()
    with pytest.raises(StoreError):
        SharedStore(bad)
