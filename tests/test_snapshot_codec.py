# tests/test_snapshot_codec.py

from __future__ import annotations

import json

import pytest

from taskify_sync.tasks.snapshot_codec import (
    Err,
    Ok,
    decode,
    decode_or_empty,
    encode,
    mark_completed,
    pending,
)
from taskify_sync.tasks.task_models import NO_TASK_KEY, TaskRecord


def test_round_trip_keeps_every_field() -> None:
    records = [
        TaskRecord(key=1, title="Buy milk"),
        TaskRecord(key=2, title="Обади се на мама", is_completed=True, completed_from_widget=True),
        TaskRecord(key=30, title="Pay rent", is_completed=True, extra={"dueDate": "2024-05-01", "priority": 2}),
    ]

    result = decode(encode(records))

    assert isinstance(result, Ok)
    assert result.records == records
    assert all(type(r.key) is int for r in result.records)


def test_keys_are_written_as_json_integers() -> None:
    raw = encode([TaskRecord(key=7, title="x")])
    data = json.loads(raw)
    assert data == [{"key": 7, "title": "x", "isCompleted": False}]
    assert type(data[0]["key"]) is int


def test_integral_float_key_decodes_to_int() -> None:
    result = decode('[{"key": 2.0, "title": "a"}]')
    assert isinstance(result, Ok)
    assert result.records[0].key == 2
    assert type(result.records[0].key) is int


@pytest.mark.parametrize("raw", [None, "", "   ", "[]"])
def test_missing_or_empty_snapshot_is_empty(raw) -> None:
    assert decode(raw) == Ok([])
    assert decode_or_empty(raw) == []


@pytest.mark.parametrize("raw", ["{not json", '{"key": 1}', "42", "[1, 2]", '[{"key": 1}, "x"]'])
def test_malformed_snapshot_is_err_and_caller_gets_empty(raw) -> None:
    assert isinstance(decode(raw), Err)
    assert decode_or_empty(raw) == []


@pytest.mark.parametrize("raw", ["[" * 100000, '[{"key": 1, "title": ' + "[" * 100000])
def test_nesting_too_deep_to_parse_is_err(raw) -> None:
    result = decode(raw)
    assert isinstance(result, Err)
    assert "invalid JSON" in result.reason
    assert decode_or_empty(raw) == []


def test_lenient_fields() -> None:
    raw = json.dumps(
        [
            {"title": "no key"},
            {"key": "5", "title": None, "isCompleted": "true"},
            {"key": 6.5, "title": 12, "isCompleted": 1, "completedFromWidget": "false"},
            {"key": True, "title": "bool key"},
        ]
    )
    result = decode(raw)
    assert isinstance(result, Ok)
    r0, r1, r2, r3 = result.records

    assert r0.key == NO_TASK_KEY
    assert not r0.is_addressable
    assert (r1.key, r1.title, r1.is_completed) == (5, "", True)
    assert (r2.key, r2.title, r2.is_completed, r2.completed_from_widget) == (NO_TASK_KEY, "12", False, False)
    assert r3.key == NO_TASK_KEY


def test_unknown_fields_survive_a_rewrite() -> None:
    raw = '[{"key":1,"title":"a","isCompleted":false,"createdAt":"2024-01-01","tags":["home"]}]'
    records = decode_or_empty(raw)
    assert records[0].extra == {"createdAt": "2024-01-01", "tags": ["home"]}

    out = json.loads(encode(records))
    assert out[0]["createdAt"] == "2024-01-01"
    assert out[0]["tags"] == ["home"]


def test_provenance_flag_only_emitted_when_set() -> None:
    out = json.loads(encode([TaskRecord(key=1, title="a"), TaskRecord(key=2, title="b", completed_from_widget=True)]))
    assert "completedFromWidget" not in out[0]
    assert out[1]["completedFromWidget"] is True


def test_encode_keeps_non_ascii_text() -> None:
    assert "Купи мляко" in encode([TaskRecord(key=1, title="Купи мляко")])


def test_mark_completed_updates_all_matches_and_keeps_order() -> None:
    records = [
        TaskRecord(key=1, title="a"),
        TaskRecord(key=2, title="b"),
        TaskRecord(key=1, title="dup"),
    ]

    updated, matched = mark_completed(records, 1)

    assert matched == 2
    assert [r.title for r in updated] == ["a", "b", "dup"]
    assert updated[0].is_completed and updated[0].completed_from_widget
    assert updated[2].is_completed and updated[2].completed_from_widget
    assert updated[1] == records[1]
    # input list is not mutated
    assert records[0].is_completed is False


def test_pending_filters_completed() -> None:
    records = [TaskRecord(key=1, is_completed=True), TaskRecord(key=2), TaskRecord(key=3)]
    assert [r.key for r in pending(records)] == [2, 3]


def test_completed_copy_does_not_share_extra_fields() -> None:
    original = TaskRecord(key=4, title="a", extra={"tags": ["home"]})

    (done,), _ = mark_completed([original], 4)
    done.extra["tags"] = ["work"]

    assert original.extra == {"tags": ["home"]}
