# src/taskify_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..app.task_sync import AppTaskSync
from ..bridge.update_bridge import WidgetUpdateBridge
from ..notifications.intake import NotificationIntake
from ..store.shared_store import SharedStore
from ..widget.relay import ActionRelay
from ..widget.renderer import WidgetRenderer


@dataclass
class AppState:
    """
    Everything the console host wires together.

    On a device these pieces live in three separate contexts that share only
    `store`; here they share a process so one REPL can drive all of them.
    """

    settings: Any
    store: SharedStore
    widget_host: Any
    renderer: WidgetRenderer
    relay: ActionRelay
    bridge: WidgetUpdateBridge
    app: AppTaskSync
    tray: Any
    windows: Any
    intake: NotificationIntake
