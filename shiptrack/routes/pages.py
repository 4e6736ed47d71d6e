"""Public informational pages and the not-found handler."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from flask import Blueprint, render_template
from flask_babel import lazy_gettext as _l

from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.pages")

bp = Blueprint("pages", __name__)


@dataclass(frozen=True)
class HelpLink:
    title: Any
    href: str
    desc: Any


# Two columns on the not-found page.
HELP_LINKS: List[List[HelpLink]] = [
    [
        HelpLink(_l("Home"), "/home", _l("Go Home")),
    ],
    [
        HelpLink(_l("Admin"), "/admin/login", _l("Manage shipments")),
    ],
]


@bp.route("/", methods=["GET"])
@bp.route("/home", methods=["GET"])
def home():
    return render_template("home.html")


def not_found(_error: Any = None):
    return render_template("404.html", help_columns=HELP_LINKS), 404


def register_pages(app: Any) -> None:
    if getattr(app, "_shiptrack_pages_bp", None):
        return
    app.register_blueprint(bp)
    app.register_error_handler(404, not_found)
    setattr(app, "_shiptrack_pages_bp", bp)
    LOG.debug("pages blueprint registered")


__all__ = ["HELP_LINKS", "HelpLink", "not_found", "register_pages", "bp"]
