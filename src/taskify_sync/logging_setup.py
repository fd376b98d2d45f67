# src/taskify_sync/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Components that run off the console thread. Their INFO chatter would
# interleave with the REPL prompt.
_BACKGROUND_PREFIXES = (
    "taskify_sync.connectors.matrix_",
    "taskify_sync.widget.refresh_loop",
)

# Everything the widget side does (render, relay, host, bridge) also goes to a
# dedicated file, so a widget session can be followed without the app noise.
_WIDGET_PREFIXES = (
    "taskify_sync.widget.",
    "taskify_sync.bridge.",
    "taskify_sync.connectors.widget_host",
)


def _level(value: int | str, default: int) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(str(value).strip().upper())
    return resolved if isinstance(resolved, int) else default


class _PrefixFilter(logging.Filter):
    def __init__(self, prefixes: tuple[str, ...]) -> None:
        super().__init__()
        self._prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.startswith(self._prefixes)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console policy:
    - own logs pass, background components only at WARNING+
    - third-party libraries (nio) and captured py.warnings only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("taskify_sync."):
            if name.startswith(_BACKGROUND_PREFIXES):
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskify",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
) -> None:
    """
    Configure root logging once, before the first component logs.

    Files under log_dir:
    - taskify.log: everything at file_level
    - widget.log: widget side only (renderer, relay, host, update bridge)

    Levels may be given as ints or names ("debug", "INFO").
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    # Thread name matters here: bridge updates and refreshes run off the main thread.
    file_fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_fmt = logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(console_level, logging.INFO))
    console.setFormatter(console_fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    main_file = logging.FileHandler(str(log_dir / "taskify.log"), encoding="utf-8")
    main_file.setLevel(_level(file_level, logging.DEBUG))
    main_file.setFormatter(file_fmt)
    root.addHandler(main_file)

    widget_file = logging.FileHandler(str(log_dir / "widget.log"), encoding="utf-8")
    widget_file.setLevel(_level(file_level, logging.DEBUG))
    widget_file.setFormatter(file_fmt)
    widget_file.addFilter(_PrefixFilter(_WIDGET_PREFIXES))
    root.addHandler(widget_file)

    logging.captureWarnings(True)
