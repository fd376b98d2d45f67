# src/taskify_sync/widget/renderer.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.ports import KeyValueStore, WidgetHost
from ..errors import DecodeError, DispatchError
from ..tasks.snapshot_codec import EMPTY_SNAPSHOT, Err, decode
from ..tasks.task_models import Language
from .view import DEFAULT_CAPACITY, WidgetView, build_view, empty_view

logger = logging.getLogger(__name__)


class WidgetRenderer:
    """
    Reads the shared snapshot and draws it into placed widget surfaces.

    Runs under a host-imposed time limit: the only I/O is the local store read
    and the surface write. Never mutates the store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        host: WidgetHost,
        *,
        tasks_key: str,
        language_key: str,
        default_language: Language | str = Language.BG,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        self._store = store
        self._host = host
        self._tasks_key = tasks_key
        self._language_key = language_key
        self._default_language = Language.from_raw(str(default_language))
        self._capacity = max(1, int(capacity))

    @classmethod
    def from_settings(cls, settings, store: KeyValueStore, host: WidgetHost) -> WidgetRenderer:
        return cls(
            store,
            host,
            tasks_key=settings.tasks_key,
            language_key=settings.language_key,
            default_language=getattr(settings, "default_language", "bg"),
            capacity=int(getattr(settings, "widget_capacity", DEFAULT_CAPACITY)),
        )

    def read_language(self) -> Language:
        """Language preference, defaulted here at the read boundary."""
        try:
            raw = self._store.get_string(self._language_key)
        except Exception:
            logger.warning("Language read failed; using %s", self._default_language.value, exc_info=True)
            return self._default_language
        return Language.from_raw(raw, self._default_language)

    def build(self, surface_id: int) -> WidgetView:
        """Derive the view for one surface. Never raises."""
        language = self.read_language()
        try:
            raw = self._store.get_string(self._tasks_key, EMPTY_SNAPSHOT)
            result = decode(raw)
            if isinstance(result, Err):
                raise DecodeError(result.reason)
            return build_view(
                result.records,
                language,
                surface_id=surface_id,
                capacity=self._capacity,
            )
        except Exception as e:
            # Unreadable state renders exactly like an empty list; no stale rows stay on screen.
            logger.warning("Widget %s: render fell back to empty state: %s", surface_id, e)
            return empty_view(surface_id, language, self._capacity)

    def render(self, surface_id: int) -> WidgetView:
        view = self.build(surface_id)
        try:
            self._host.update_surface(surface_id, view)
        except Exception as e:
            raise DispatchError(f"surface update failed: {e}", surface_id=surface_id) from e
        logger.debug(
            "Widget %s rendered pending=%d rows=%d",
            surface_id,
            view.pending_count,
            len(view.visible_rows),
        )
        return view

    def render_all(self, surface_ids: Iterable[int] | None = None) -> list[WidgetView]:
        """Render the given surfaces (default: every placed one). One failure does not stop the rest."""
        if surface_ids is None:
            try:
                ids = list(self._host.placed_surface_ids())
            except Exception:
                logger.exception("Listing placed widget surfaces failed")
                return []
        else:
            ids = list(surface_ids)

        views: list[WidgetView] = []
        for surface_id in ids:
            try:
                views.append(self.render(surface_id))
            except DispatchError:
                logger.exception("Widget %s: render dispatch failed", surface_id)
        return views
