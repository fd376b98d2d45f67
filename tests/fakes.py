# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from taskify_sync.core.ports import BroadcastReceiver
from taskify_sync.errors import StoreError
from taskify_sync.notifications.intake import NotificationRequest
from taskify_sync.widget.actions import Intent
from taskify_sync.widget.view import WidgetView


class FakeStore:
    """
    Dict-backed KeyValueStore.

    - Counts writes for "never mutates the store" assertions
    - Can be switched to fail reads or writes
    """

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})
        self.writes: list[tuple[str, str]] = []
        self.fail_reads = False
        self.fail_writes = False

    def get_string(self, key: str, default: str | None = None) -> str | None:
        if self.fail_reads:
            raise StoreError("read failed (fake)")
        return self.values.get(key, default)

    def put_string(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StoreError("write failed (fake)")
        self.writes.append((key, value))
        self.values[key] = value


class FakeWidgetHost:
    """In-memory WidgetHost: records drawn views and broadcasts."""

    def __init__(self, placed: list[int] | None = None) -> None:
        self.placed: list[int] = list(placed or [])
        self.views: dict[int, WidgetView] = {}
        self.updates: list[int] = []
        self.broadcasts: list[Intent] = []
        self.receivers: dict[str, list[BroadcastReceiver]] = {}
        self.failing_surfaces: set[int] = set()
        self.fail_listing = False
        self.fail_broadcast = False

    def placed_surface_ids(self) -> list[int]:
        if self.fail_listing:
            raise RuntimeError("widget manager unavailable (fake)")
        return list(self.placed)

    def update_surface(self, surface_id: int, view: WidgetView) -> None:
        if surface_id in self.failing_surfaces:
            raise RuntimeError(f"surface {surface_id} is gone (fake)")
        self.updates.append(surface_id)
        self.views[surface_id] = view

    def send_broadcast(self, intent: Intent) -> None:
        if self.fail_broadcast:
            raise RuntimeError("broadcast failed (fake)")
        self.broadcasts.append(intent)
        for receiver in self.receivers.get(intent.action, []):
            receiver(intent)

    def register_receiver(self, action: str, receiver: BroadcastReceiver) -> None:
        self.receivers.setdefault(action, []).append(receiver)


@dataclass(slots=True)
class FakeNotificationSurface:
    shown: list[NotificationRequest] = field(default_factory=list)
    closed: list[str] = field(default_factory=list)

    async def show_notification(self, request: NotificationRequest) -> None:
        self.shown.append(request)

    async def close_notification(self, tag: str) -> None:
        self.closed.append(tag)

    def active(self) -> list[NotificationRequest]:
        return [n for n in self.shown if n.tag not in self.closed]

    def get(self, tag: str) -> NotificationRequest | None:
        for n in reversed(self.shown):
            if n.tag == tag:
                return n
        return None


@dataclass(slots=True)
class FakeWindow:
    id: str
    focusable: bool = True


@dataclass(slots=True)
class FakeWindows:
    windows: list[FakeWindow] = field(default_factory=list)
    can_open: bool = True
    focused: list[str] = field(default_factory=list)
    opened: list[str] = field(default_factory=list)
    include_uncontrolled_seen: list[bool] = field(default_factory=list)

    async def match_all(self, *, include_uncontrolled: bool = True) -> list[Any]:
        self.include_uncontrolled_seen.append(include_uncontrolled)
        return list(self.windows)

    async def focus(self, window: Any) -> None:
        self.focused.append(window.id)

    async def open_window(self, url: str) -> bool:
        if not self.can_open:
            return False
        self.opened.append(url)
        return True


class FakeBridge:
    """Counts update requests; optionally raises to prove saves do not depend on it."""

    def __init__(self, *, fail: bool = False) -> None:
        self.requests = 0
        self.fail = fail

    def request_update(self) -> None:
        self.requests += 1
        if self.fail:
            raise RuntimeError("bridge unavailable (fake)")
