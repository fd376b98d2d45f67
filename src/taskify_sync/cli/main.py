# src/taskify_sync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts the host contexts:
- console REPL in the main thread (optional),
- scheduled widget refresh in a background thread,
- Matrix push intake in a background thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.background import BackgroundRunner, start_in_background
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..widget.refresh_loop import run_widget_refresh_loop

logger = logging.getLogger(__name__)


def _stop_runners(runners: list[BackgroundRunner]) -> None:
    for runner in runners:
        try:
            runner.stop()
            runner.join(timeout=10.0)
        except Exception:
            logger.debug("Stopping %s failed.", runner.name, exc_info=True)


def main() -> None:
    settings = get_settings()

    setup_logging(log_dir=settings.data_dir / "logs", console_level=settings.log_level)
    logging.getLogger("nio").setLevel(logging.INFO)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskify"))

    state = create_initial_state(settings=settings)

    runners: list[BackgroundRunner] = []

    refresh = start_in_background(
        "widget-refresh",
        lambda stop: run_widget_refresh_loop(
            state.renderer,
            interval_seconds=settings.widget_refresh_seconds,
            stop_event=stop,
        ),
    )
    if refresh is not None:
        runners.append(refresh)

    if settings.matrix_enabled:
        from ..connectors.matrix_push import start_matrix_push_in_background

        push = start_matrix_push_in_background(state)
        if push is not None:
            runners.append(push)

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running background contexts only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        _stop_runners(runners)
        state.store.close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
