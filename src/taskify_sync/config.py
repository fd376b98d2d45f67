# src/taskify_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for every execution context (app, widget host, push intake).
- Store keys and namespace are a persisted contract shared with the app; they are
  configurable only so tests and migrations can point at other names.
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

ENV_PREFIX = "TASKIFY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Shared store (persisted contract) ----
    data_dir: Path
    store_path: Path
    store_namespace: str
    tasks_key: str
    language_key: str
    default_language: str

    # ---- Widget host ----
    widget_surfaces_dir: Path
    widget_capacity: int
    widget_refresh_seconds: float

    # ---- Notifications ----
    notification_title: Optional[str]
    notification_body: Optional[str]
    notification_tag: str
    notification_icon: str
    app_url: str

    # ---- Connector flags ----
    console_enabled: bool
    matrix_enabled: bool

    # ---- Matrix (push transport) ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_rooms: List[str]
    matrix_store_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="taskify") or "taskify"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskify"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "shared_prefs.sqlite3")
        store_namespace = _env(_k("STORE_NAMESPACE"), "FlutterSharedPreferences")
        tasks_key = _env(_k("TASKS_KEY"), "flutter.widget_tasks")
        language_key = _env(_k("LANGUAGE_KEY"), "flutter.app_language")
        default_language = _env(_k("DEFAULT_LANGUAGE"), "bg").strip().lower() or "bg"

        widget_surfaces_dir = _env_path(_k("WIDGET_SURFACES_DIR"), data_dir / "widgets")
        widget_capacity = max(1, _env_int(_k("WIDGET_CAPACITY"), 3))
        # Platform minimum for scheduled widget updates is 30 minutes.
        widget_refresh_seconds = _env_float(_k("WIDGET_REFRESH_SECONDS"), 1800.0)

        # Empty means "use the localized placeholder for default_language".
        notification_title = _first_env(_k("NOTIFICATION_TITLE"), default=None)
        notification_body = _first_env(_k("NOTIFICATION_BODY"), default=None)
        notification_tag = _env(_k("NOTIFICATION_TAG"), "task-reminder")
        notification_icon = _env(_k("NOTIFICATION_ICON"), "/icons/Icon-192.png")
        app_url = _env(_k("APP_URL"), "/")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        matrix_enabled = _env_bool(_k("MATRIX_ENABLED"), False)

        matrix_homeserver = (_first_env(_k("MATRIX_HOMESERVER"), "MATRIX_HOMESERVER", default="") or "").strip()
        matrix_user_id = (_first_env(_k("MATRIX_USER_ID"), "MATRIX_USER_ID", default="") or "").strip()
        matrix_password = (_first_env(_k("MATRIX_PASSWORD"), "MATRIX_PASSWORD", default="") or "").strip()
        matrix_rooms = _env_list(_k("MATRIX_ROOMS"), _env_list("MATRIX_ROOMS", []))
        matrix_store_path = _env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            store_namespace=store_namespace,
            tasks_key=tasks_key,
            language_key=language_key,
            default_language=default_language,
            widget_surfaces_dir=widget_surfaces_dir,
            widget_capacity=widget_capacity,
            widget_refresh_seconds=widget_refresh_seconds,
            notification_title=notification_title,
            notification_body=notification_body,
            notification_tag=notification_tag,
            notification_icon=notification_icon,
            app_url=app_url,
            console_enabled=console_enabled,
            matrix_enabled=matrix_enabled,
            matrix_homeserver=matrix_homeserver,
            matrix_user_id=matrix_user_id,
            matrix_password=matrix_password,
            matrix_rooms=matrix_rooms,
            matrix_store_path=matrix_store_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
