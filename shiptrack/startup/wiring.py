"""Application initialization / wiring.

Orchestrates: Flask app construction, session & CSRF setup, Babel,
route registration.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask
from flask_wtf.csrf import CSRFProtect

from shiptrack import config
from shiptrack.i18n import configure_babel
from shiptrack.routes.inject import register_all as register_routes
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.startup")

_PACKAGE_DIR = Path(__file__).resolve().parents[1]
TEMPLATES_DIR = _PACKAGE_DIR / "templates"
STATIC_DIR = _PACKAGE_DIR / "static"

csrf = CSRFProtect()


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(
        config.APP_NAME,
        template_folder=str(TEMPLATES_DIR),
        static_folder=str(STATIC_DIR),
    )
    app.config.update(
        SECRET_KEY=config.secret_key(),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=config.env_bool("SHIPTRACK_SECURE_COOKIES", default=False),
    )
    if overrides:
        app.config.update(dict(overrides))

    configure_babel(app)
    csrf.init_app(app)
    register_routes(app)
    LOG.info("shiptrack app ready %s", config.summarize_runtime_config())
    return app


__all__ = ["create_app", "csrf"]
