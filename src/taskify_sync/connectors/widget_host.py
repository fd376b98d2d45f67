# src/taskify_sync/connectors/widget_host.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from ..core.ports import BroadcastReceiver
from ..widget.actions import Intent
from ..widget.view import WidgetView

logger = logging.getLogger(__name__)


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    # Unique tmp name per thread: the bridge thread and the main thread may draw at once.
    tmp = path.with_name(f".{path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
    os.replace(tmp, path)


class FileWidgetHost:
    """
    Widget host backed by a directory.

    - a placed surface is a file `<id>.json` holding the last drawn view
    - drawing replaces the file atomically, so a reader never sees half a view
    - broadcasts are delivered synchronously to receivers registered per action
    """

    def __init__(self, surfaces_dir: str | Path) -> None:
        self._dir = Path(surfaces_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._receivers: dict[str, list[BroadcastReceiver]] = {}
        self._lock = threading.Lock()

    def _path(self, surface_id: int) -> Path:
        return self._dir / f"{int(surface_id)}.json"

    # ---- placement ----

    def placed_surface_ids(self) -> list[int]:
        ids: list[int] = []
        for p in self._dir.glob("*.json"):
            if p.stem.isdigit():
                ids.append(int(p.stem))
        return sorted(ids)

    def place_surface(self, surface_id: int | None = None) -> int:
        with self._lock:
            if surface_id is None:
                surface_id = max(self.placed_surface_ids(), default=0) + 1
            path = self._path(surface_id)
            if not path.exists():
                _atomic_write_json(path, {})
        logger.info("Widget surface %s placed", surface_id)
        return int(surface_id)

    def remove_surface(self, surface_id: int) -> bool:
        path = self._path(surface_id)
        if not path.exists():
            return False
        with contextlib.suppress(FileNotFoundError):
            path.unlink()
        logger.info("Widget surface %s removed", surface_id)
        return True

    # ---- drawing ----

    def update_surface(self, surface_id: int, view: WidgetView) -> None:
        path = self._path(surface_id)
        if not path.exists():
            # Same as the platform: updates for surfaces that are not placed are dropped.
            logger.debug("Widget surface %s not placed; update dropped", surface_id)
            return
        _atomic_write_json(path, view.to_dict())

    def read_surface(self, surface_id: int) -> dict[str, Any] | None:
        path = self._path(surface_id)
        try:
            data = json.loads(path.read_text("utf-8"))
        except FileNotFoundError:
            return None
        except ValueError:
            logger.warning("Widget surface %s holds unreadable content", surface_id)
            return {}
        return data if isinstance(data, dict) else {}

    def resolve_tap(self, surface_id: int, slot: int | None = None) -> Intent | None:
        """
        Intent bound to a tap target on the drawn surface.

        slot=None is the container (open app); otherwise a row's check control.
        Hidden rows have no target.
        """
        data = self.read_surface(surface_id)
        if not data:
            return None
        if slot is None:
            return Intent.from_dict(data.get("on_container"))

        for row in data.get("rows") or []:
            if isinstance(row, dict) and row.get("slot") == slot and row.get("visible"):
                return Intent.from_dict(row.get("on_check"))
        return None

    # ---- broadcasts ----

    def register_receiver(self, action: str, receiver: BroadcastReceiver) -> None:
        with self._lock:
            self._receivers.setdefault(action, []).append(receiver)

    def send_broadcast(self, intent: Intent) -> None:
        with self._lock:
            receivers = list(self._receivers.get(intent.action, []))
        if not receivers:
            logger.debug("Broadcast %s: no receivers", intent.action)
            return
        for receiver in receivers:
            try:
                receiver(intent)
            except Exception:
                logger.exception("Broadcast receiver crashed for action=%s", intent.action)
