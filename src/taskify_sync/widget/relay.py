# src/taskify_sync/widget/relay.py

from __future__ import annotations

"""
Action relay.

Receives intents delivered by the host to the widget's process and turns
"complete task" taps into a store mutation, independent of whether the app is
running. This is an OS callback boundary: nothing raised here may escape, or
the host may disable the surface.
"""

import logging

from ..core.ports import KeyValueStore
from ..errors import DecodeError, DispatchError, StoreError
from ..tasks.snapshot_codec import EMPTY_SNAPSHOT, Err, decode, encode, mark_completed
from ..tasks.task_models import NO_TASK_KEY
from .actions import CompleteTask, Intent, RefreshSurfaces, UnknownCommand, parse_command
from .renderer import WidgetRenderer

logger = logging.getLogger(__name__)


class ActionRelay:
    def __init__(self, store: KeyValueStore, renderer: WidgetRenderer, *, tasks_key: str) -> None:
        self._store = store
        self._renderer = renderer
        self._tasks_key = tasks_key

    def on_receive(self, intent: Intent) -> None:
        """Host entry point for every intent addressed to the widget."""
        try:
            command = parse_command(intent)

            if isinstance(command, CompleteTask):
                self.complete_task(command.task_key)
            elif isinstance(command, RefreshSurfaces):
                self.on_update(list(command.surface_ids) or None)
            elif isinstance(command, UnknownCommand):
                logger.debug("Ignoring intent action=%s", command.action)
        except Exception:
            logger.exception("Widget intent handling failed action=%s", getattr(intent, "action", None))

    def on_update(self, surface_ids: list[int] | None = None) -> None:
        """Scheduled or broadcast refresh."""
        try:
            self._renderer.render_all(surface_ids)
        except Exception:
            logger.exception("Widget refresh failed")

    def complete_task(self, task_key: int) -> bool:
        """
        Mark every record with task_key completed (from the widget), write the whole
        snapshot back, then re-render every placed surface.

        Returns True when the dispatch finished (including "no record matched").
        """
        if task_key == NO_TASK_KEY:
            return False

        try:
            matched = self._apply_completion(task_key)
        except DispatchError as e:
            logger.warning("Complete task %s failed: %s", task_key, e)
            return False

        if matched:
            logger.info("Task %s completed from widget (%d record(s))", task_key, matched)
        else:
            logger.info("Complete task %s: no matching record; snapshot unchanged", task_key)

        self._renderer.render_all()
        return True

    def _apply_completion(self, task_key: int) -> int:
        # Read-modify-write without a lock: a concurrent app write in this window is lost or
        # overwrites ours. The whole value is replaced, so the snapshot is never half-written.
        try:
            raw = self._store.get_string(self._tasks_key, EMPTY_SNAPSHOT)
            result = decode(raw)
            if isinstance(result, Err):
                # Leave a corrupt snapshot as it is; the app owns recovery.
                raise DecodeError(result.reason)

            updated, matched = mark_completed(result.records, task_key)
            if matched:
                self._store.put_string(self._tasks_key, encode(updated))
            return matched
        except (DecodeError, StoreError) as e:
            raise DispatchError(str(e)) from e
