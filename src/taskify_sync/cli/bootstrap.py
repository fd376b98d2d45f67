# src/taskify_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, widget host, renderer/relay, update bridge, app sync and
  notification intake into AppState,
- registers the relay as the widget's broadcast receiver.
"""

from __future__ import annotations

import logging

from ..app.task_sync import AppTaskSync
from ..bridge.update_bridge import WidgetUpdateBridge
from ..config import get_settings
from ..connectors.console_connector import ConsoleAppWindows, ConsoleNotificationTray
from ..connectors.widget_host import FileWidgetHost
from ..core.state import AppState
from ..notifications.intake import NotificationIntake
from ..store.shared_store import SharedStore
from ..widget.actions import ACTION_APPWIDGET_UPDATE, ACTION_COMPLETE_TASK
from ..widget.relay import ActionRelay
from ..widget.renderer import WidgetRenderer

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)
    settings.widget_surfaces_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, tray=None, windows=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the notification tray / window list) injectable makes
    the app easier to test and avoids hidden global config reads.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SharedStore(settings.store_path, namespace=settings.store_namespace)
    host = FileWidgetHost(settings.widget_surfaces_dir)
    renderer = WidgetRenderer.from_settings(settings, store, host)
    relay = ActionRelay(store, renderer, tasks_key=settings.tasks_key)

    host.register_receiver(ACTION_COMPLETE_TASK, relay.on_receive)
    host.register_receiver(ACTION_APPWIDGET_UPDATE, relay.on_receive)

    bridge = WidgetUpdateBridge(host, renderer)
    app = AppTaskSync.from_settings(settings, store, bridge)

    if tray is None:
        tray = ConsoleNotificationTray()
    if windows is None:
        windows = ConsoleAppWindows(
            app_url=getattr(settings, "app_url", "/"),
            attached=bool(getattr(settings, "console_enabled", True)),
        )
    intake = NotificationIntake.from_settings(settings, tray, windows)

    logger.debug("State wired: store=%s widgets=%s", settings.store_path, settings.widget_surfaces_dir)

    return AppState(
        settings=settings,
        store=store,
        widget_host=host,
        renderer=renderer,
        relay=relay,
        bridge=bridge,
        app=app,
        tray=tray,
        windows=windows,
        intake=intake,
    )
