# src/taskify_sync/tasks/snapshot_codec.py

"""
Task snapshot codec.

Wire format: a JSON array of objects. Known fields are `key` (int), `title` (str),
`isCompleted` (bool) and `completedFromWidget` (bool). Any other field is kept on
the record and written back untouched, because the app and the widget may run
different schema versions.

`decode` is total: it returns Ok(records) or Err(reason) and never raises.
Callers that just want a list use `decode_or_empty`.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from ..errors import DecodeError
from .task_models import NO_TASK_KEY, TaskRecord

logger = logging.getLogger(__name__)

FIELD_KEY = "key"
FIELD_TITLE = "title"
FIELD_IS_COMPLETED = "isCompleted"
FIELD_COMPLETED_FROM_WIDGET = "completedFromWidget"

_KNOWN_FIELDS = frozenset({FIELD_KEY, FIELD_TITLE, FIELD_IS_COMPLETED, FIELD_COMPLETED_FROM_WIDGET})

EMPTY_SNAPSHOT = "[]"


@dataclass(frozen=True, slots=True)
class Ok:
    records: list[TaskRecord]


@dataclass(frozen=True, slots=True)
class Err:
    reason: str


DecodeResult = Ok | Err


# ---- field coercion (lenient, like the platform's opt* getters) ----


def _opt_int(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if math.isfinite(raw) and raw.is_integer():
            return int(raw)
        return default
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return default
    return default


def _opt_bool(raw: Any, default: bool = False) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        s = raw.strip().lower()
        if s == "true":
            return True
        if s == "false":
            return False
    return default


def _opt_str(raw: Any, default: str = "") -> str:
    if raw is None:
        return default
    if isinstance(raw, str):
        return raw
    return str(raw)


def _parse_record(obj: Any, index: int) -> TaskRecord:
    if not isinstance(obj, dict):
        raise DecodeError(f"element {index} is {type(obj).__name__}, expected object")

    return TaskRecord(
        key=_opt_int(obj.get(FIELD_KEY), NO_TASK_KEY),
        title=_opt_str(obj.get(FIELD_TITLE)),
        is_completed=_opt_bool(obj.get(FIELD_IS_COMPLETED)),
        completed_from_widget=_opt_bool(obj.get(FIELD_COMPLETED_FROM_WIDGET)),
        extra={k: v for k, v in obj.items() if k not in _KNOWN_FIELDS},
    )


def _parse(raw: str) -> list[TaskRecord]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow.
        raise DecodeError(f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise DecodeError(f"top-level value is {type(data).__name__}, expected array")

    return [_parse_record(obj, i) for i, obj in enumerate(data)]


# ---- public API ----


def decode(raw: str | None) -> DecodeResult:
    """Decode a stored snapshot. A missing or blank value is an empty snapshot."""
    if raw is None or not raw.strip():
        return Ok([])
    try:
        return Ok(_parse(raw))
    except DecodeError as e:
        return Err(str(e))


def decode_or_empty(raw: str | None) -> list[TaskRecord]:
    result = decode(raw)
    if isinstance(result, Err):
        logger.warning("Snapshot decode failed, using empty list: %s", result.reason)
        return []
    return result.records


def record_to_dict(record: TaskRecord) -> dict[str, Any]:
    out: dict[str, Any] = {
        FIELD_KEY: int(record.key),
        FIELD_TITLE: record.title,
        FIELD_IS_COMPLETED: bool(record.is_completed),
    }
    if record.completed_from_widget:
        out[FIELD_COMPLETED_FROM_WIDGET] = True
    for k, v in record.extra.items():
        out.setdefault(k, v)
    return out


def encode(records: Iterable[TaskRecord]) -> str:
    payload = [record_to_dict(r) for r in records]
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        # Extras came from JSON, so this only happens for values set in-process.
        logger.exception("Failed to JSON-encode extra fields; dropping them.")
        return json.dumps(
            [{k: v for k, v in d.items() if k in _KNOWN_FIELDS} for d in payload],
            ensure_ascii=False,
            separators=(",", ":"),
        )


def pending(records: Iterable[TaskRecord]) -> list[TaskRecord]:
    """Incomplete records, in snapshot order."""
    return [r for r in records if not r.is_completed]


def mark_completed(records: Iterable[TaskRecord], task_key: int) -> tuple[list[TaskRecord], int]:
    """
    Complete every record whose key equals task_key.

    Keys are not assumed unique: all matches are updated. Returns the new list
    (same order) and the number of matches.
    """
    out: list[TaskRecord] = []
    matched = 0
    for r in records:
        if r.key == task_key:
            out.append(replace(r, is_completed=True, completed_from_widget=True, extra=dict(r.extra)))
            matched += 1
        else:
            out.append(r)
    return out, matched
