"""Session keys and supported locales shared by routes and helpers."""
from __future__ import annotations

SESSION_ADMIN_KEY = "shiptrack_is_admin"
SESSION_PANEL_KEY = "shiptrack_panel_id"
SESSION_LOCALE_KEY = "shiptrack_locale"

SUPPORTED_LANGUAGES = ("en",)
DEFAULT_LANGUAGE = "en"

__all__ = [
    "SESSION_ADMIN_KEY",
    "SESSION_PANEL_KEY",
    "SESSION_LOCALE_KEY",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
]
