# src/task_tracker/notifiers/matrix_client.py

"""Send-only Matrix connection: client config plus a stored access token."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from nio import AsyncClient, AsyncClientConfig, LoginResponse

logger = logging.getLogger(__name__)

_SESSION_KEYS = ("access_token", "user_id", "device_id")


def client_config(settings) -> AsyncClientConfig:
    # nio retries timeouts and 429s forever by default; a send must fail fast instead.
    return AsyncClientConfig(
        encryption_enabled=False,
        store_sync_tokens=False,
        max_timeouts=0,
        max_limit_exceeded=0,
        request_timeout=float(getattr(settings, "http_timeout", 10.0)),
    )


def read_session(path: Path) -> dict[str, str] | None:
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unreadable Matrix session %s, falling back to password login: %r", path, e)
        return None
    if not isinstance(data, dict) or not all(data.get(k) for k in _SESSION_KEYS):
        logger.warning("Matrix session %s is incomplete, falling back to password login", path)
        return None
    return {k: str(data[k]) for k in _SESSION_KEYS}


def write_session(path: Path, resp: LoginResponse) -> None:
    data = {"access_token": resp.access_token, "user_id": resp.user_id, "device_id": resp.device_id}
    tmp = path.with_suffix(".tmp")
    try:
        tmp.write_text(json.dumps(data), "utf-8")
        os.replace(tmp, path)
        os.chmod(path, 0o600)
    except OSError as e:
        # Still logged in; the next send just logs in again.
        logger.error("Cannot save Matrix session to %s: %r", path, e)
        return
    logger.info("Matrix session saved to %s (user=%s)", path, resp.user_id)


async def create_matrix_client(settings) -> AsyncClient | None:
    """
    Logged-in AsyncClient, or None when Matrix is not configured or login is refused.

    The token is kept in <matrix_store_path>/session.json (a secret, keep the dir
    out of version control). Transport errors from login propagate to the caller.
    """
    homeserver = (getattr(settings, "matrix_homeserver", "") or "").strip()
    user_id = (getattr(settings, "matrix_user_id", "") or "").strip()
    password = (getattr(settings, "matrix_password", "") or "").strip()
    if not homeserver or not user_id:
        logger.error("Matrix is not configured: set TRACKER_MATRIX_HOMESERVER and TRACKER_MATRIX_USER_ID")
        return None

    store_dir = Path(getattr(settings, "matrix_store_path", Path(".local/tracker/matrix_store")))
    store_dir.mkdir(parents=True, exist_ok=True)
    session_file = store_dir / "session.json"

    client = AsyncClient(homeserver, user_id, config=client_config(settings))

    session = read_session(session_file)
    if session is not None:
        client.access_token = session["access_token"]
        client.user_id = session["user_id"]
        client.device_id = session["device_id"]
        return client

    if not password:
        logger.error("No Matrix session yet; set TRACKER_MATRIX_PASSWORD once to log in.")
        await client.close()
        return None

    device_name = f"{getattr(settings, 'app_name', 'task-tracker')} notifier"
    try:
        resp = await client.login(password=password, device_name=device_name)
    except BaseException:
        await client.close()
        raise

    if not isinstance(resp, LoginResponse):
        logger.error("Matrix login failed: %r", resp)
        await client.close()
        return None

    write_session(session_file, resp)
    return client
