"""Shipment image management admin UI blueprint.

Routes (all under /admin/shipments, admin only):
    GET  /<tracking_id>/images                     -> panel page
    GET  /<tracking_id>/images/state               -> panel state (JSON)
    POST /<tracking_id>/images/select              -> choose the pending file
    POST /<tracking_id>/images/upload              -> upload pending file & attach
    POST /<tracking_id>/images/<image_id>/remove   -> press the delete control
    POST /<tracking_id>/images/<image_id>/cancel   -> cancel a pending delete

POST routes answer JSON when the client asks for it and otherwise
redirect back to the panel page.
"""
from __future__ import annotations

import math
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from flask import Blueprint, jsonify, redirect, render_template, request, url_for
from flask_babel import lazy_gettext as _l
from werkzeug.datastructures import FileStorage

from shiptrack import config
from shiptrack.routes.pages import not_found
from shiptrack.services import image_removal, image_upload
from shiptrack.services.shipments_api import (
    Shipment,
    ShipmentNotFoundError,
    ShipmentUnavailableError,
    load_shipment,
)
from shiptrack.utils import PermissionError, ensure_admin, panel_session_id
from shiptrack.utils.logging import get_logger

bp = Blueprint("shiptrack_admin", __name__, url_prefix="/admin/shipments")
LOG = get_logger("shiptrack.admin_shipments")

_ERROR_MESSAGES = {
    "forbidden": _l("Admin privileges required."),
    "shipment_missing": _l("Shipment not found."),
    "shipment_api_unavailable": _l("Shipment service is unavailable. Try again later."),
    "image_missing": _l("Image not found on this shipment."),
}


def _wants_json() -> bool:
    if request.is_json:
        return True
    best = request.accept_mimetypes.best_match(["text/html", "application/json"])
    return best == "application/json"


def _json_error(code: str, status: int = 400, *, details: Optional[Dict[str, Any]] = None):
    payload: Dict[str, Any] = {"error": code}
    message = _ERROR_MESSAGES.get(code)
    if message:
        payload["message"] = str(message)
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status


def _login_redirect():
    target = request.full_path or request.path or "/"
    if target.endswith("?"):
        target = target[:-1]
    tracking_id = (request.view_args or {}).get("tracking_id")
    if request.method != "GET" and tracking_id:
        target = _panel_url(tracking_id)
    destination = f"{url_for('shiptrack_login.login_page')}?{urlencode({'next': target})}"
    return redirect(destination)


def _require_admin():
    try:
        ensure_admin()
    except PermissionError:
        if _wants_json():
            return _json_error("forbidden", 403)
        return _login_redirect()
    return True


def _panel_url(tracking_id: str) -> str:
    return url_for("shiptrack_admin.images_page", tracking_id=tracking_id)


def _image_rows(shipment: Shipment, panel_id: str, now: float, delay: float) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for image in shipment.images:
        control = image_removal.load_control(panel_id, shipment.tracking_id, image.id, now=now, delay=delay)
        rows.append({"image": image, "control": control, "control_view": control.describe(now, delay)})
    return rows


def _panel_state(shipment: Shipment, panel_id: str) -> Dict[str, Any]:
    now = time.time()
    delay = config.delete_confirm_delay()
    draft = image_upload.load_draft(panel_id, shipment.tracking_id)
    rows = _image_rows(shipment, panel_id, now, delay)
    waits = [row["control"].ready_in(now, delay) for row in rows if row["control"].state is image_removal.RemovalState.CONFIRMING]
    return {
        "shipment": shipment,
        "draft": draft,
        "draft_view": image_upload.describe(draft),
        "rows": rows,
        "refresh_after": max(1, math.ceil(min(waits))) if waits else None,
    }


def _state_payload(state: Dict[str, Any]) -> Dict[str, Any]:
    shipment: Shipment = state["shipment"]
    return {
        "trackingId": shipment.tracking_id,
        "draft": state["draft_view"],
        "images": [
            {**row["image"].to_dict(), "control": row["control_view"]}
            for row in state["rows"]
        ],
    }


def _load_or_error(tracking_id: str):
    """Return (shipment, None) or (None, response)."""
    try:
        return load_shipment(tracking_id), None
    except ShipmentNotFoundError:
        if _wants_json():
            return None, _json_error("shipment_missing", 404)
        return None, not_found()
    except ShipmentUnavailableError as exc:
        LOG.warning("shipment api unavailable tracking_id=%s error=%s", tracking_id, exc)
        if _wants_json():
            return None, _json_error("shipment_api_unavailable", 502)
        return None, (
            render_template(
                "admin/shipment_images.html",
                tracking_id=tracking_id,
                panel=None,
                page_error=_ERROR_MESSAGES["shipment_api_unavailable"],
            ),
            502,
        )


@bp.route("/<tracking_id>/images", methods=["GET"])
def images_page(tracking_id: str):
    auth = _require_admin()
    if auth is not True:
        return auth
    shipment, error = _load_or_error(tracking_id)
    if error is not None:
        return error
    panel = _panel_state(shipment, panel_session_id())
    return render_template(
        "admin/shipment_images.html",
        tracking_id=shipment.tracking_id,
        panel=panel,
        page_error=None,
    )


@bp.route("/<tracking_id>/images/state", methods=["GET"])
def images_state(tracking_id: str):
    auth = _require_admin()
    if auth is not True:
        return auth
    shipment, error = _load_or_error(tracking_id)
    if error is not None:
        return error
    return jsonify(_state_payload(_panel_state(shipment, panel_session_id())))


def _after_draft_change(tracking_id: str, draft: image_upload.Draft):
    if _wants_json():
        status = 200
        if isinstance(draft, image_upload.Failed):
            status = 400 if draft.error == image_upload.ERROR_FILE_MISSING else 502
        return jsonify({"trackingId": tracking_id, "draft": image_upload.describe(draft)}), status
    return redirect(_panel_url(tracking_id))


@bp.route("/<tracking_id>/images/select", methods=["POST"])
def select_image(tracking_id: str):
    auth = _require_admin()
    if auth is not True:
        return auth
    _shipment, error = _load_or_error(tracking_id)
    if error is not None:
        return error
    panel_id = panel_session_id()
    storage: Optional[FileStorage] = request.files.get("file")
    pending: Optional[image_upload.PendingFile] = None
    if storage is not None and storage.filename:
        pending = image_upload.PendingFile(
            filename=storage.filename,
            content=storage.read(),
            content_type=storage.mimetype or None,
        )
    draft = image_upload.select_file(image_upload.load_draft(panel_id, tracking_id), pending)
    image_upload.store_draft(panel_id, tracking_id, draft)
    LOG.debug("draft updated tracking_id=%s state=%s", tracking_id, draft.kind)
    return _after_draft_change(tracking_id, draft)


@bp.route("/<tracking_id>/images/upload", methods=["POST"])
def upload_image(tracking_id: str):
    auth = _require_admin()
    if auth is not True:
        return auth
    _shipment, error = _load_or_error(tracking_id)
    if error is not None:
        return error
    panel_id = panel_session_id()
    draft = image_upload.load_draft(panel_id, tracking_id)
    result = image_upload.submit(
        draft,
        tracking_id,
        on_uploading=lambda in_flight: image_upload.store_draft(panel_id, tracking_id, in_flight),
    )
    image_upload.store_draft(panel_id, tracking_id, result)
    return _after_draft_change(tracking_id, result)


@bp.route("/<tracking_id>/images/<image_id>/remove", methods=["POST"])
def remove_image(tracking_id: str, image_id: str):
    auth = _require_admin()
    if auth is not True:
        return auth
    shipment, error = _load_or_error(tracking_id)
    if error is not None:
        return error
    if shipment.find_image(image_id) is None:
        if _wants_json():
            return _json_error("image_missing", 404)
        return redirect(_panel_url(tracking_id))
    now = time.time()
    delay = config.delete_confirm_delay()
    control = image_removal.press(panel_session_id(), tracking_id, image_id, now=now, delay=delay)
    if _wants_json():
        return jsonify({"trackingId": tracking_id, "imageId": image_id, "control": control.describe(now, delay)})
    return redirect(_panel_url(tracking_id))


@bp.route("/<tracking_id>/images/<image_id>/cancel", methods=["POST"])
def cancel_remove(tracking_id: str, image_id: str):
    auth = _require_admin()
    if auth is not True:
        return auth
    _shipment, error = _load_or_error(tracking_id)
    if error is not None:
        return error
    control = image_removal.cancel(panel_session_id(), tracking_id, image_id)
    if _wants_json():
        delay = config.delete_confirm_delay()
        return jsonify({
            "trackingId": tracking_id,
            "imageId": image_id,
            "control": control.describe(time.time(), delay),
        })
    return redirect(_panel_url(tracking_id))


def register_admin_shipments(app: Any) -> None:
    if not getattr(app, "_shiptrack_admin_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_shiptrack_admin_bp", bp)


__all__ = ["register_admin_shipments", "bp"]
