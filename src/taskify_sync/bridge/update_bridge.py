# src/taskify_sync/bridge/update_bridge.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.ports import WidgetHost
from ..widget.actions import appwidget_update_intent
from ..widget.renderer import WidgetRenderer

logger = logging.getLogger(__name__)

WIDGET_CHANNEL = "taskify/widget"
METHOD_UPDATE_WIDGET = "updateWidget"


class CallStatus(StrEnum):
    SUCCESS = "success"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True, slots=True)
class MethodResult:
    status: CallStatus
    value: Any = None


class WidgetUpdateBridge:
    """
    App -> widget host bridge.

    The app calls `updateWidget` right after it writes the snapshot, so placed
    surfaces reflect the change now instead of on the next scheduled cycle.
    Best-effort only: the app's own state never depends on the outcome.
    """

    channel = WIDGET_CHANNEL

    def __init__(self, host: WidgetHost, renderer: WidgetRenderer) -> None:
        self._host = host
        self._renderer = renderer

    def handle_method_call(self, method: str) -> MethodResult:
        if method == METHOD_UPDATE_WIDGET:
            self.update_widgets()
            return MethodResult(CallStatus.SUCCESS)
        return MethodResult(CallStatus.NOT_IMPLEMENTED)

    def update_widgets(self) -> None:
        """Render every placed surface, then broadcast an update to any other bound receiver."""
        try:
            surface_ids = list(self._host.placed_surface_ids())
        except Exception:
            logger.exception("Listing placed widget surfaces failed")
            return

        self._renderer.render_all(surface_ids)

        try:
            self._host.send_broadcast(appwidget_update_intent(surface_ids))
        except Exception:
            logger.exception("Widget update broadcast failed")

        logger.debug("Widget update requested for %d surface(s)", len(surface_ids))

    def request_update(self) -> threading.Thread:
        """Fire-and-forget: run update_widgets on a daemon thread and return at once."""

        def runner() -> None:
            try:
                self.update_widgets()
            except Exception:
                logger.exception("Background widget update failed")

        t = threading.Thread(target=runner, name="widget-update", daemon=True)
        t.start()
        return t
