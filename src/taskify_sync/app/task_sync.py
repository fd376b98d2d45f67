# src/taskify_sync/app/task_sync.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from ..core.ports import KeyValueStore
from ..tasks.snapshot_codec import EMPTY_SNAPSHOT, decode_or_empty, encode
from ..tasks.task_models import Language, TaskRecord

logger = logging.getLogger(__name__)


class AppTaskSync:
    """
    The app's half of the shared snapshot.

    Every mutation is load -> change -> save of the whole list. After a save the
    widget bridge is poked without waiting for it; a failing bridge never fails
    the save.
    """

    def __init__(self, store: KeyValueStore, bridge=None, *, tasks_key: str, language_key: str) -> None:
        self._store = store
        self._bridge = bridge
        self._tasks_key = tasks_key
        self._language_key = language_key

    @classmethod
    def from_settings(cls, settings, store: KeyValueStore, bridge=None) -> AppTaskSync:
        return cls(store, bridge, tasks_key=settings.tasks_key, language_key=settings.language_key)

    def load_tasks(self) -> list[TaskRecord]:
        return decode_or_empty(self._store.get_string(self._tasks_key, EMPTY_SNAPSHOT))

    def save_tasks(self, records: Iterable[TaskRecord], *, notify: bool = True) -> None:
        records = list(records)
        self._store.put_string(self._tasks_key, encode(records))
        logger.debug("Snapshot saved: %d task(s)", len(records))
        if notify:
            self._notify_widgets()

    def _notify_widgets(self) -> None:
        if self._bridge is None:
            return
        try:
            self._bridge.request_update()
        except Exception:
            logger.warning("Widget update request failed", exc_info=True)

    def add_task(self, title: str) -> TaskRecord:
        title = (title or "").strip()
        if not title:
            raise ValueError("title is required")

        records = self.load_tasks()
        next_key = max((r.key for r in records), default=0) + 1
        task = TaskRecord(key=max(1, next_key), title=title)
        records.append(task)
        self.save_tasks(records)
        logger.info("Task added key=%s", task.key)
        return task

    def set_completed(self, task_key: int, completed: bool = True) -> bool:
        """App-side toggle. Clears the widget provenance flag."""
        records = self.load_tasks()
        changed = False
        out: list[TaskRecord] = []
        for r in records:
            if r.key == task_key:
                r = replace(r, is_completed=completed, completed_from_widget=False, extra=dict(r.extra))
                changed = True
            out.append(r)
        if changed:
            self.save_tasks(out)
        return changed

    def remove_task(self, task_key: int) -> bool:
        records = self.load_tasks()
        kept = [r for r in records if r.key != task_key]
        if len(kept) == len(records):
            return False
        self.save_tasks(kept)
        return True

    def widget_completions(self) -> list[TaskRecord]:
        """Records the widget completed that the app has not acknowledged yet."""
        return [r for r in self.load_tasks() if r.completed_from_widget]

    def acknowledge_widget_completions(self, task_keys: Iterable[int]) -> int:
        keys = set(task_keys)
        if not keys:
            return 0
        records = self.load_tasks()
        count = 0
        out: list[TaskRecord] = []
        for r in records:
            if r.key in keys and r.completed_from_widget:
                r = replace(r, completed_from_widget=False, extra=dict(r.extra))
                count += 1
            out.append(r)
        if count:
            # Completion state is unchanged, so the widget has nothing new to draw.
            self.save_tasks(out, notify=False)
        return count

    def language(self, default: Language | str = Language.BG) -> Language:
        return Language.from_raw(self._store.get_string(self._language_key), default)

    def set_language(self, language: Language | str) -> Language:
        lang = Language(str(language).strip().lower())
        self._store.put_string(self._language_key, lang.value)
        self._notify_widgets()
        return lang
