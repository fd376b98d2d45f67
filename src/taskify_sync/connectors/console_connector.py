# src/taskify_sync/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..notifications.intake import NotificationRequest

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotificationTray:
    """
    Notification tray printed to the console.

    Active notifications are kept by tag; showing a tag that is already active
    replaces it, like the system tray does.
    """

    def __init__(self, printer: Callable[[str], None] = _print_ts) -> None:
        self._printer = printer
        self._active: dict[str, NotificationRequest] = {}
        self._lock = threading.Lock()

    async def show_notification(self, request: NotificationRequest) -> None:
        with self._lock:
            self._active[request.tag] = request
        self._printer(f"[NOTIFY] {request.title}: {request.body} (tag={request.tag})")

    async def close_notification(self, tag: str) -> None:
        with self._lock:
            removed = self._active.pop(tag, None)
        if removed is not None:
            self._printer(f"[NOTIFY] dismissed tag={tag}")

    def active(self) -> list[NotificationRequest]:
        with self._lock:
            return list(self._active.values())

    def get(self, tag: str) -> NotificationRequest | None:
        with self._lock:
            return self._active.get(tag)


@dataclass(frozen=True, slots=True)
class ClientWindow:
    id: str
    url: str
    focusable: bool = True


class ConsoleAppWindows:
    """The interactive console is the app's only window when it is attached."""

    def __init__(self, *, app_url: str = "/", attached: bool = True, printer: Callable[[str], None] = _print_ts) -> None:
        self._app_url = app_url
        self._attached = attached
        self._printer = printer

    async def match_all(self, *, include_uncontrolled: bool = True) -> list[ClientWindow]:
        if not self._attached:
            return []
        return [ClientWindow(id="console", url=self._app_url)]

    async def focus(self, window: ClientWindow) -> None:
        self._printer(f"[APP] focused window {window.id}")

    async def open_window(self, url: str) -> bool:
        if not self._attached:
            logger.info("No interactive session to open %s in", url)
            return False
        self._printer(f"[APP] opening {url}")
        return True


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task title to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input, emit=emit)
            if response is None:
                # Plain text: the app adds a task.
                task = state.app.add_task(user_input)
                response = f"Added task {task.key}: {task.title}"
        except ValueError as e:
            response = str(e)
        except Exception:
            logger.exception("Console command handler crashed.")
            response = "Internal error while handling a command."

        _print_ts(response)

    logger.info("Console connector finished.")
