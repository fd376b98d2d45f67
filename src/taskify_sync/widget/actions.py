# src/taskify_sync/widget/actions.py

"""
Intents and widget commands.

An Intent is the host's generic, untyped message (action name + extras).
It is decoded exactly once, at the receiving boundary, into a closed set of
commands that the relay matches on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import NO_TASK_KEY

ACTION_COMPLETE_TASK = "taskify.widget.ACTION_COMPLETE_TASK"
ACTION_APPWIDGET_UPDATE = "taskify.appwidget.ACTION_APPWIDGET_UPDATE"
ACTION_LAUNCH_APP = "taskify.intent.ACTION_MAIN"

EXTRA_TASK_KEY = "task_key"
EXTRA_APPWIDGET_IDS = "appWidgetIds"

COMPLETE_URI_PREFIX = "taskify://complete/"


@dataclass(frozen=True, slots=True)
class Intent:
    action: str
    extras: dict[str, Any] = field(default_factory=dict)
    # Distinct data URIs keep the host from collapsing pending intents for different tasks.
    data: str | None = None
    request_code: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "extras": dict(self.extras),
            "data": self.data,
            "request_code": self.request_code,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Intent | None:
        if not isinstance(raw, dict) or not isinstance(raw.get("action"), str):
            return None
        extras = raw.get("extras")
        data = raw.get("data")
        try:
            request_code = int(raw.get("request_code") or 0)
        except (TypeError, ValueError):
            request_code = 0
        return cls(
            action=raw["action"],
            extras=dict(extras) if isinstance(extras, dict) else {},
            data=data if isinstance(data, str) else None,
            request_code=request_code,
        )


def complete_task_intent(task_key: int) -> Intent:
    return Intent(
        action=ACTION_COMPLETE_TASK,
        extras={EXTRA_TASK_KEY: int(task_key)},
        data=f"{COMPLETE_URI_PREFIX}{int(task_key)}",
        request_code=int(task_key),
    )


def launch_app_intent() -> Intent:
    return Intent(action=ACTION_LAUNCH_APP)


def appwidget_update_intent(surface_ids: list[int]) -> Intent:
    return Intent(
        action=ACTION_APPWIDGET_UPDATE,
        extras={EXTRA_APPWIDGET_IDS: [int(i) for i in surface_ids]},
    )


# ---- commands ----


@dataclass(frozen=True, slots=True)
class CompleteTask:
    task_key: int


@dataclass(frozen=True, slots=True)
class RefreshSurfaces:
    # Empty means "every placed surface".
    surface_ids: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownCommand:
    action: str


Command = CompleteTask | RefreshSurfaces | UnknownCommand


def _int_extra(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def parse_command(intent: Intent) -> Command:
    if intent.action == ACTION_COMPLETE_TASK:
        return CompleteTask(task_key=_int_extra(intent.extras.get(EXTRA_TASK_KEY), NO_TASK_KEY))

    if intent.action == ACTION_APPWIDGET_UPDATE:
        raw_ids = intent.extras.get(EXTRA_APPWIDGET_IDS) or []
        ids: list[int] = []
        if isinstance(raw_ids, (list, tuple)):
            for x in raw_ids:
                v = _int_extra(x, -1)
                if v >= 0:
                    ids.append(v)
        return RefreshSurfaces(surface_ids=tuple(ids))

    return UnknownCommand(action=intent.action)
