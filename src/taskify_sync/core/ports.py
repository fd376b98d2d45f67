# src/taskify_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the sync core.

Each execution context talks to the host environment only through these
Protocols. This keeps hosts (console, file-backed widgets, real devices)
swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

if TYPE_CHECKING:
    from ..notifications.intake import NotificationRequest
    from ..widget.actions import Intent
    from ..widget.view import WidgetView

BroadcastReceiver = Callable[["Intent"], None]


class KeyValueStore(Protocol):
    """Durable string store shared by every context."""

    def get_string(self, key: str, default: str | None = None) -> str | None: ...
    def put_string(self, key: str, value: str) -> None: ...


class WidgetHost(Protocol):
    """
    Host-side widget manager: knows which surfaces are placed, draws views
    into them and routes broadcasts to registered receivers.
    """

    def placed_surface_ids(self) -> list[int]: ...
    def update_surface(self, surface_id: int, view: WidgetView) -> None: ...
    def send_broadcast(self, intent: Intent) -> None: ...
    def register_receiver(self, action: str, receiver: BroadcastReceiver) -> None: ...


class NotificationSurface(Protocol):
    """System notification tray."""

    def show_notification(self, request: NotificationRequest) -> Awaitable[None]: ...
    def close_notification(self, tag: str) -> Awaitable[None]: ...


class AppWindows(Protocol):
    """
    Open application windows/contexts as seen from a detached handler.

    Window objects are opaque to the caller apart from a `focusable` attribute.
    """

    def match_all(self, *, include_uncontrolled: bool = True) -> Awaitable[list[Any]]: ...
    def focus(self, window: Any) -> Awaitable[None]: ...
    def open_window(self, url: str) -> Awaitable[bool]: ...
