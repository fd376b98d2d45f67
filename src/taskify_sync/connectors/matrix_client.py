# src/taskify_sync/connectors/matrix_client.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from nio import AsyncClient, AsyncClientConfig, LoginResponse

logger = logging.getLogger(__name__)

try:
    import olm  # type: ignore  # noqa: F401

    OLM_AVAILABLE = True
except Exception:
    OLM_AVAILABLE = False

SESSION_FIELDS = ("access_token", "user_id", "device_id")


def _session_file(store_dir: Path) -> Path:
    return store_dir / "session.json"


def _read_session(path: Path) -> dict[str, str] | None:
    try:
        data: Any = json.loads(path.read_text("utf-8"))
    except FileNotFoundError:
        return None
    except ValueError as e:
        logger.warning("Matrix session file %s is not valid JSON: %r", path, e)
        return None
    if not isinstance(data, dict) or not all(data.get(f) for f in SESSION_FIELDS):
        logger.warning("Matrix session file %s is missing required fields", path)
        return None
    return {f: str(data[f]) for f in SESSION_FIELDS}


def _write_session(path: Path, session: dict[str, str]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(session, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    try:
        os.chmod(path, 0o600)
    except OSError:
        # Not critical on Windows or restricted filesystems.
        pass


async def create_matrix_client(settings) -> AsyncClient | None:
    """
    Matrix client for the push transport.

    The access token is kept in <matrix_store_path>/session.json so restarts do
    not log in again. That file is a credential; keep it under the gitignored data dir.
    """
    homeserver = (getattr(settings, "matrix_homeserver", "") or "").strip()
    user_id = (getattr(settings, "matrix_user_id", "") or "").strip()
    password = (getattr(settings, "matrix_password", "") or "").strip()
    store_dir = Path(getattr(settings, "matrix_store_path", Path(".local/taskify/matrix_store")))

    if not homeserver or not user_id:
        logger.error("Matrix is not configured: set TASKIFY_MATRIX_HOMESERVER and TASKIFY_MATRIX_USER_ID")
        return None

    store_dir.mkdir(parents=True, exist_ok=True)
    session_file = _session_file(store_dir)

    encryption_enabled = bool(OLM_AVAILABLE)
    if not encryption_enabled:
        logger.warning("python-olm not installed: encrypted push rooms will not decrypt")

    client = AsyncClient(
        homeserver,
        user_id,
        store_path=str(store_dir) if encryption_enabled else None,
        config=AsyncClientConfig(encryption_enabled=encryption_enabled, store_sync_tokens=True),
    )

    session = _read_session(session_file)
    if session is not None:
        client.access_token = session["access_token"]
        client.user_id = session["user_id"]
        client.device_id = session["device_id"]
        if encryption_enabled:
            try:
                client.load_store()
            except Exception as e:
                logger.warning("Failed to load E2EE store: %r", e)
        logger.info("Matrix session restored for %s", client.user_id)
        return client

    if not password:
        logger.error(
            "Matrix session.json not found and password is not set. "
            "Set TASKIFY_MATRIX_PASSWORD once to bootstrap a session."
        )
        return None

    device_name = f"{getattr(settings, 'app_name', 'taskify')} push intake"
    resp = await client.login(password=password, device_name=device_name)
    if not isinstance(resp, LoginResponse):
        logger.error("Matrix login failed: %r", resp)
        return None

    try:
        _write_session(
            session_file,
            {"access_token": resp.access_token, "user_id": resp.user_id, "device_id": resp.device_id},
        )
        logger.info("Matrix session saved to %s (user=%s)", session_file, resp.user_id)
    except OSError as e:
        logger.error("Failed to write Matrix session.json (%s): %r", session_file, e)
        return None

    return client
