"""Admin sign-in with the shared admin token."""
from __future__ import annotations

from typing import Any, List, Optional

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_babel import gettext as _

from shiptrack import config
from shiptrack.utils.identity import (
    clear_admin_session,
    is_admin_user,
    mark_admin_session,
    verify_admin_token,
)
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.admin_login")

bp = Blueprint("shiptrack_login", __name__, url_prefix="/admin")


def _default_target() -> str:
    return url_for("pages.home")


def _sanitize_next(raw_target: Optional[str]) -> str:
    target = (raw_target or "").strip()
    # Only same-site absolute paths; "//host" would leave the site.
    if target.startswith("/") and not target.startswith("//"):
        return target
    return _default_target()


@bp.route("/login", methods=["GET", "POST"])
def login_page():
    next_url = _sanitize_next(request.values.get("next"))
    form_errors: List[str] = []

    if request.method == "GET" and is_admin_user():
        return redirect(next_url)

    if request.method == "POST":
        if config.admin_token() is None:
            form_errors.append(_("Admin access is not configured."))
        elif verify_admin_token(request.form.get("token")):
            mark_admin_session()
            LOG.info("admin session opened remote=%s", request.remote_addr)
            flash(_("Signed in successfully."), "success")
            return redirect(next_url)
        else:
            LOG.warning("admin sign-in rejected remote=%s", request.remote_addr)
            form_errors.append(_("Invalid admin token."))

    status = 401 if form_errors else 200
    return render_template("admin/login.html", next_url=next_url, form_errors=form_errors), status


@bp.route("/logout", methods=["POST"])
def logout():
    clear_admin_session()
    flash(_("Signed out."), "info")
    return redirect(_default_target())


def register_admin_login(app: Any) -> None:
    if getattr(app, "_shiptrack_login_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_shiptrack_login_bp", bp)
    LOG.debug("admin login blueprint registered")


__all__ = ["register_admin_login", "bp"]
