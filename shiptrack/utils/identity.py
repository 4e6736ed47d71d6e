"""Identity & permission helpers for the admin suite."""
from __future__ import annotations

import hmac
import secrets
from typing import Any, Optional

from flask import session

from shiptrack import config as app_config
from shiptrack.utils import constants


def is_admin_user() -> bool:
    return bool(session.get(constants.SESSION_ADMIN_KEY, False))


class PermissionError(Exception):
    pass


def ensure_admin() -> None:
    if not is_admin_user():
        raise PermissionError("Admin privileges required")


def verify_admin_token(candidate: Any) -> bool:
    expected = app_config.admin_token()
    if not expected or not isinstance(candidate, str) or not candidate:
        return False
    return hmac.compare_digest(candidate.strip().encode("utf-8"), expected.encode("utf-8"))


def mark_admin_session() -> None:
    session[constants.SESSION_ADMIN_KEY] = True
    session.modified = True


def clear_admin_session() -> None:
    session.pop(constants.SESSION_ADMIN_KEY, None)
    session.pop(constants.SESSION_PANEL_KEY, None)


def panel_session_id() -> str:
    """Random id scoping this visitor's ephemeral panel state."""
    current: Optional[str] = session.get(constants.SESSION_PANEL_KEY)
    if isinstance(current, str) and current:
        return current
    fresh = secrets.token_hex(12)
    session[constants.SESSION_PANEL_KEY] = fresh
    session.modified = True
    return fresh


__all__ = [
    "is_admin_user",
    "ensure_admin",
    "verify_admin_token",
    "mark_admin_session",
    "clear_admin_session",
    "panel_session_id",
    "PermissionError",
]
