# src/taskify_sync/connectors/matrix_push.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Optional, Set

from nio import MatrixRoom, RoomMessageText

from ..core.state import AppState
from ..notifications.intake import PushPayload
from .background import BackgroundRunner, start_in_background
from .matrix_client import create_matrix_client

logger = logging.getLogger(__name__)


def _ms_now() -> int:
    return int(time.time() * 1000)


def _room_allowlist(settings_rooms: list[str]) -> Optional[Set[str]]:
    rooms = [r.strip() for r in (settings_rooms or []) if str(r).strip()]
    return set(rooms) if rooms else None


async def _run_matrix_push(state: AppState, stop_event: asyncio.Event) -> None:
    """
    Matrix as the push delivery network.

    Every text message in an allowed room is one push payload: either the JSON
    `{"notification": {...}, "data": {...}}` shape or plain text used as the body.
    It is handed to the notification intake as a background message.
    """
    settings = state.settings
    if not settings.matrix_enabled:
        logger.info("Matrix push disabled via settings.")
        return

    startup_ts = _ms_now()
    allowed_rooms = _room_allowlist(getattr(settings, "matrix_rooms", []) or [])
    logger.info("Matrix push allowed_rooms=%s", allowed_rooms if allowed_rooms is not None else "ALL")

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client creation failed; push intake will stop.")
        return

    async def message_callback(room: MatrixRoom, event: RoomMessageText) -> None:
        # Skip backlog from before startup and our own messages.
        ts = getattr(event, "server_timestamp", None)
        if ts is not None and ts <= startup_ts:
            return
        if event.sender == client.user_id:
            return
        if allowed_rooms is not None and room.room_id not in allowed_rooms:
            return

        body = (event.body or "").strip()
        if not body:
            return

        try:
            await state.intake.on_background_message(PushPayload.from_text(body))
        except Exception:
            logger.exception("Push intake failed for event from %s in %s", event.sender, room.room_id)

    client.add_event_callback(message_callback, RoomMessageText)

    try:
        await client.sync(timeout=30000, full_state=True)
        logger.info("Matrix push initial sync done. Joined rooms: %d", len(client.rooms))

        while not stop_event.is_set():
            await client.sync(timeout=30000, full_state=False)

    except asyncio.CancelledError:
        logger.info("Matrix push cancelled.")
    except Exception:
        logger.exception("Matrix push connector crashed.")
    finally:
        with contextlib.suppress(Exception):
            await client.close()
        logger.info("Matrix push stopped.")


def start_matrix_push_in_background(state: AppState) -> BackgroundRunner | None:
    if not state.settings.matrix_enabled:
        logger.info("Matrix push disabled, not starting.")
        return None
    return start_in_background("matrix-push", lambda stop: _run_matrix_push(state, stop))
