# src/taskify_sync/widget/refresh_loop.py

from __future__ import annotations

"""
Scheduled widget refresh.

Stands in for the host's own update cycle: a small polling loop that
re-renders every placed surface at a fixed interval. App-side changes reach
the widget sooner through the update bridge; this loop only bounds how stale
a surface can get when nobody calls it.
"""

import asyncio
import logging

from .renderer import WidgetRenderer

logger = logging.getLogger(__name__)


async def run_widget_refresh_loop(
        renderer: WidgetRenderer,
        *,
        interval_seconds: float = 1800.0,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Render every placed surface now, then once per interval_seconds.

    To stop the loop, cancel the coroutine/task or set stop_event.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while stop_event is None or not stop_event.is_set():
        try:
            views = renderer.render_all()
            logger.debug("Scheduled refresh rendered %d surface(s)", len(views))
        except Exception:
            logger.exception("Scheduled widget refresh failed")

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)
        except asyncio.TimeoutError:
            pass

    logger.info("Widget refresh loop stopped.")
