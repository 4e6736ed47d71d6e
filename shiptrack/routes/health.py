"""Lightweight health probe endpoint.

Exposes /healthz for container / LB health checks. Reports whether the
two remote collaborators are configured; it does not call them.
"""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from shiptrack import config
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.health")

bp = Blueprint("health", __name__)


@bp.route("/healthz", methods=["GET"])
def healthz():
    media_ok = config.media_host_settings().configured
    api_ok = config.shipment_api_base() is not None
    healthy = media_ok and api_ok
    status_code = 200 if healthy else 503
    if not healthy:
        LOG.debug("health degraded media_host=%s shipment_api=%s", media_ok, api_ok)
    return jsonify({
        "status": "ok" if healthy else "degraded",
        "media_host": media_ok,
        "shipment_api": api_ok,
    }), status_code


def register_health(app: Any) -> None:
    if getattr(app, "_health_bp", None):  # idempotent
        return
    app.register_blueprint(bp)
    setattr(app, "_health_bp", bp)
    LOG.debug("health blueprint registered")


__all__ = ["register_health"]
