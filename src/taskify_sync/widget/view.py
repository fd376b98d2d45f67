# src/taskify_sync/widget/view.py

"""
Rendered widget view.

A WidgetView is derived on every render and never cached or persisted by the
renderer itself. It is what the host draws into the surface: which slots are
visible, their text, and the action bound to each tap target.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..tasks.snapshot_codec import pending
from ..tasks.task_models import Language, TaskRecord
from . import strings
from .actions import Intent, complete_task_intent, launch_app_intent

DEFAULT_CAPACITY = 3


@dataclass(frozen=True, slots=True)
class TaskRow:
    slot: int
    visible: bool
    title: str = ""
    task_key: int | None = None
    on_check: Intent | None = None


@dataclass(frozen=True, slots=True)
class WidgetView:
    surface_id: int
    language: Language
    title: str | None
    title_visible: bool
    empty_visible: bool
    empty_text: str
    rows: tuple[TaskRow, ...]
    pending_count: int
    on_container: Intent

    @property
    def visible_rows(self) -> list[TaskRow]:
        return [r for r in self.rows if r.visible]

    def to_dict(self) -> dict[str, Any]:
        return {
            "surface_id": self.surface_id,
            "language": self.language.value,
            "title": self.title,
            "title_visible": self.title_visible,
            "empty_visible": self.empty_visible,
            "empty_text": self.empty_text,
            "pending_count": self.pending_count,
            "rows": [
                {
                    "slot": r.slot,
                    "visible": r.visible,
                    "title": r.title,
                    "task_key": r.task_key,
                    "on_check": r.on_check.to_dict() if r.on_check else None,
                }
                for r in self.rows
            ],
            "on_container": self.on_container.to_dict(),
        }


def empty_view(surface_id: int, language: Language, capacity: int = DEFAULT_CAPACITY) -> WidgetView:
    """Empty state. Also used when the snapshot cannot be read."""
    return WidgetView(
        surface_id=surface_id,
        language=language,
        title=None,
        title_visible=False,
        empty_visible=True,
        empty_text=strings.text(language, "empty"),
        rows=tuple(TaskRow(slot=i, visible=False) for i in range(capacity)),
        pending_count=0,
        on_container=launch_app_intent(),
    )


def build_view(
    records: Iterable[TaskRecord],
    language: Language,
    *,
    surface_id: int,
    capacity: int = DEFAULT_CAPACITY,
) -> WidgetView:
    todo = pending(records)
    if not todo:
        return empty_view(surface_id, language, capacity)

    rows: list[TaskRow] = []
    for i in range(capacity):
        if i < len(todo):
            task = todo[i]
            rows.append(
                TaskRow(
                    slot=i,
                    visible=True,
                    title=task.title,
                    task_key=task.key,
                    on_check=complete_task_intent(task.key) if task.is_addressable else None,
                )
            )
        else:
            rows.append(TaskRow(slot=i, visible=False))

    return WidgetView(
        surface_id=surface_id,
        language=language,
        # Count covers every pending task, not only the visible rows.
        title=strings.count_title(language, len(todo)),
        title_visible=True,
        empty_visible=False,
        empty_text="",
        rows=tuple(rows),
        pending_count=len(todo),
        on_container=launch_app_intent(),
    )
