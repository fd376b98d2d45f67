# src/taskify_sync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# Key value used when a record carries no usable key. Never addressable.
NO_TASK_KEY = -1


class Language(StrEnum):
    """
    Supported UI locales.

    The app writes the preference; widget and notification contexts only read it.
    """

    BG = "bg"
    EN = "en"

    @classmethod
    def from_raw(cls, raw: str | None, default: Language | str = "bg") -> Language:
        fallback = cls._coerce(default) or cls.BG
        if not raw:
            return fallback
        return cls._coerce(raw) or fallback

    @classmethod
    def _coerce(cls, raw: str | Language) -> Language | None:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


@dataclass(slots=True)
class TaskRecord:
    key: int
    title: str = ""
    is_completed: bool = False

    # Provenance: set only when the widget's completion action wrote the record.
    completed_from_widget: bool = False

    # Fields this version does not know about, re-emitted verbatim on encode.
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_addressable(self) -> bool:
        return self.key != NO_TASK_KEY
