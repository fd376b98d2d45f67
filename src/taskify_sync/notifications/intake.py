# src/taskify_sync/notifications/intake.py

from __future__ import annotations

"""
Notification intake.

Detached push handler with two entry points:
- on_background_message: the app is not in the foreground; show a system notification
- on_notification_click: the user clicked it; close it and bring the app forward

Each invocation is one-shot and keeps no state between calls. The correlation
tag travels with the notification; what the app does with it is up to the app.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..core.ports import AppWindows, NotificationSurface
from ..tasks.task_models import Language
from ..widget import strings

logger = logging.getLogger(__name__)

DEFAULT_TAG = "task-reminder"
DEFAULT_ICON = "/icons/Icon-192.png"
CORRELATION_KEY = "taskId"


@dataclass(frozen=True, slots=True)
class PushPayload:
    title: str | None = None
    body: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Any) -> PushPayload:
        """Tolerant parse: anything missing or of the wrong type becomes None / {}."""
        if not isinstance(raw, dict):
            return cls()

        notification = raw.get("notification")
        if not isinstance(notification, dict):
            notification = {}

        def _s(v: Any) -> str | None:
            if v is None:
                return None
            s = v if isinstance(v, str) else str(v)
            return s or None

        data = raw.get("data")
        return cls(
            title=_s(notification.get("title")),
            body=_s(notification.get("body")),
            data=dict(data) if isinstance(data, dict) else {},
        )

    @classmethod
    def from_text(cls, text: str) -> PushPayload:
        """JSON payload text, or plain text used as the body."""
        s = (text or "").strip()
        if not s:
            return cls()
        if s.startswith("{"):
            try:
                return cls.from_mapping(json.loads(s))
            except (ValueError, RecursionError):
                logger.debug("Push text looked like JSON but did not parse; using it as body")
        return cls(body=s)


@dataclass(frozen=True, slots=True)
class NotificationRequest:
    title: str
    body: str
    tag: str
    data: dict[str, Any] = field(default_factory=dict)
    icon: str = DEFAULT_ICON
    badge: str = DEFAULT_ICON
    # Stay on screen until the user dismisses it.
    require_interaction: bool = True


class ClickOutcome(StrEnum):
    FOCUSED = "focused"
    OPENED = "opened"
    IGNORED = "ignored"


class NotificationIntake:
    def __init__(
        self,
        surface: NotificationSurface,
        windows: AppWindows,
        *,
        language: Language | str = Language.BG,
        default_title: str | None = None,
        default_body: str | None = None,
        default_tag: str = DEFAULT_TAG,
        icon: str = DEFAULT_ICON,
        app_url: str = "/",
    ) -> None:
        lang = Language.from_raw(str(language))
        self._surface = surface
        self._windows = windows
        self._default_title = default_title or strings.text(lang, "notification_title")
        self._default_body = default_body or strings.text(lang, "notification_body")
        self._default_tag = default_tag or DEFAULT_TAG
        self._icon = icon
        self._app_url = app_url

    @classmethod
    def from_settings(cls, settings, surface: NotificationSurface, windows: AppWindows) -> NotificationIntake:
        return cls(
            surface,
            windows,
            language=getattr(settings, "default_language", "bg"),
            default_title=getattr(settings, "notification_title", None),
            default_body=getattr(settings, "notification_body", None),
            default_tag=getattr(settings, "notification_tag", DEFAULT_TAG),
            icon=getattr(settings, "notification_icon", DEFAULT_ICON),
            app_url=getattr(settings, "app_url", "/"),
        )

    def build_request(self, payload: PushPayload) -> NotificationRequest:
        tag_raw = payload.data.get(CORRELATION_KEY)
        tag = str(tag_raw) if tag_raw not in (None, "") else self._default_tag
        return NotificationRequest(
            title=payload.title or self._default_title,
            body=payload.body or self._default_body,
            tag=tag,
            data=dict(payload.data),
            icon=self._icon,
            badge=self._icon,
            require_interaction=True,
        )

    async def on_background_message(self, payload: PushPayload | dict[str, Any]) -> NotificationRequest:
        if not isinstance(payload, PushPayload):
            payload = PushPayload.from_mapping(payload)

        request = self.build_request(payload)
        logger.info("Background push received: title=%r tag=%s", request.title, request.tag)
        await self._surface.show_notification(request)
        return request

    async def on_notification_click(self, notification: NotificationRequest) -> ClickOutcome:
        logger.info("Notification clicked: tag=%s", notification.tag)
        await self._surface.close_notification(notification.tag)

        windows = await self._windows.match_all(include_uncontrolled=True)
        for window in windows:
            if getattr(window, "focusable", False):
                await self._windows.focus(window)
                return ClickOutcome.FOCUSED

        if await self._windows.open_window(self._app_url):
            return ClickOutcome.OPENED

        logger.warning("Notification click: no window to focus and opening a new one failed")
        return ClickOutcome.IGNORED
