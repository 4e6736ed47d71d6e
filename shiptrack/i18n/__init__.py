"""Flask-Babel wiring: locale selection and translation directories."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from flask import request, session
from flask_babel import Babel

from shiptrack.utils.constants import DEFAULT_LANGUAGE, SESSION_LOCALE_KEY, SUPPORTED_LANGUAGES
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.i18n")

TRANSLATIONS_DIR = Path(__file__).resolve().parents[1] / "translations"

babel = Babel()


def normalize_language_choice(raw: Optional[str]) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    candidate = raw.strip().lower().replace("-", "_").split("_", 1)[0]
    return candidate if candidate in SUPPORTED_LANGUAGES else None


def select_locale() -> str:
    preferred = normalize_language_choice(session.get(SESSION_LOCALE_KEY))
    if preferred:
        return preferred
    best = request.accept_languages.best_match(SUPPORTED_LANGUAGES)
    return best or DEFAULT_LANGUAGE


def configure_babel(app) -> None:
    if "babel" in getattr(app, "extensions", {}):
        return
    app.config.setdefault("BABEL_DEFAULT_LOCALE", DEFAULT_LANGUAGE)
    if TRANSLATIONS_DIR.is_dir():
        app.config.setdefault("BABEL_TRANSLATION_DIRECTORIES", str(TRANSLATIONS_DIR))
    babel.init_app(app, locale_selector=select_locale)
    LOG.debug("Flask-Babel configured default_locale=%s", app.config["BABEL_DEFAULT_LOCALE"])


__all__ = ["babel", "configure_babel", "select_locale", "normalize_language_choice"]
