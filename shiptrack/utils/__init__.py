"""Utility helpers."""
from .identity import (
    is_admin_user,
    ensure_admin,
    verify_admin_token,
    mark_admin_session,
    clear_admin_session,
    panel_session_id,
    PermissionError,
)
from . import constants

__all__ = [
    "is_admin_user",
    "ensure_admin",
    "verify_admin_token",
    "mark_admin_session",
    "clear_admin_session",
    "panel_session_id",
    "PermissionError",
    "constants",
]
