"""Shipment API client.

Thin read/write wrapper around the remote shipment service:

    GET    /shipments/<tracking_id>
    POST   /shipments/<tracking_id>/images          {"cloudId", "url"}
    DELETE /shipments/<tracking_id>/images/<image_id>

Reads are cached per tracking id for a short TTL; every successful write
drops the cached entry so the next read reflects the mutation.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from shiptrack import config
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.shipments_api")

READ_TIMEOUT = 10
WRITE_TIMEOUT = 15


class ShipmentNotFoundError(LookupError):
    """Raised when the shipment API does not know the tracking id."""


class ShipmentUnavailableError(RuntimeError):
    """Raised when the shipment API cannot be reached or answers garbage."""


@dataclass(frozen=True)
class ShipmentImage:
    id: str
    url: str
    cloud_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["ShipmentImage"]:
        raw_id = data.get("id")
        if raw_id is None:
            raw_id = data.get("_id")
        url = data.get("url")
        if raw_id is None or not isinstance(url, str) or not url:
            return None
        cloud_id = data.get("cloudId")
        if cloud_id is None:
            cloud_id = data.get("cloud_id")
        return cls(id=str(raw_id), url=url, cloud_id=str(cloud_id) if cloud_id else None)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "url": self.url, "cloudId": self.cloud_id}


@dataclass(frozen=True)
class Shipment:
    tracking_id: str
    images: List[ShipmentImage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], tracking_id: Optional[str] = None) -> "Shipment":
        tid = data.get("trackingId", data.get("tracking_id")) or tracking_id
        if not tid:
            raise ValueError("tracking_id_missing")
        images: List[ShipmentImage] = []
        raw_images = data.get("images")
        if isinstance(raw_images, list):
            for item in raw_images:
                if not isinstance(item, dict):
                    continue
                image = ShipmentImage.from_dict(item)
                if image is None:
                    LOG.debug("skipping malformed image entry tracking_id=%s entry=%s", tid, item)
                    continue
                images.append(image)
        return cls(tracking_id=str(tid), images=images)

    def find_image(self, image_id: str) -> Optional[ShipmentImage]:
        for image in self.images:
            if image.id == image_id:
                return image
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"trackingId": self.tracking_id, "images": [i.to_dict() for i in self.images]}


@dataclass
class _ShipmentCacheEntry:
    shipment: Shipment
    fetched_at: float


_SHIPMENT_CACHE: Dict[str, _ShipmentCacheEntry] = {}
_SHIPMENT_CACHE_LOCK = threading.Lock()


def _api_headers() -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    token = config.shipment_api_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _api_url(path: str) -> Optional[str]:
    base = config.shipment_api_base()
    if not base:
        return None
    return f"{base}/{path.lstrip('/')}"


def _shipment_path(tracking_id: str) -> str:
    return f"shipments/{quote(tracking_id, safe='')}"


def _parse_response(r: requests.Response) -> Any:
    if r.status_code == 204 or not r.content:
        return {}
    try:
        return r.json()
    except ValueError:
        return {"raw": r.text}


def invalidate_cache(tracking_id: Optional[str] = None) -> None:
    with _SHIPMENT_CACHE_LOCK:
        if tracking_id is None:
            _SHIPMENT_CACHE.clear()
        else:
            _SHIPMENT_CACHE.pop(tracking_id, None)


def fetch_shipment(tracking_id: str, timeout: int = READ_TIMEOUT) -> Tuple[bool, Dict[str, Any]]:
    """Fetch one shipment record (uncached)."""
    target = (tracking_id or "").strip()
    if not target:
        return False, {"error": "tracking_id_required"}
    url = _api_url(_shipment_path(target))
    if not url:
        return False, {"error": "not_configured"}
    try:
        r = requests.get(url, headers=_api_headers(), timeout=timeout)
    except requests.RequestException as exc:
        LOG.warning("fetch_shipment failed tracking_id=%s error=%s", target, exc)
        return False, {"error": "request_failed", "details": str(exc)}
    data = _parse_response(r)
    if r.status_code == 404:
        return False, {"error": "not_found"}
    if r.status_code != 200:
        return False, {"error": "http_error", "status": r.status_code, "details": data}
    if not isinstance(data, dict):
        return False, {"error": "invalid_json"}
    record = data.get("shipment") if isinstance(data.get("shipment"), dict) else data
    try:
        shipment = Shipment.from_dict(record, tracking_id=target)
    except ValueError:
        return False, {"error": "invalid_payload", "details": data}
    return True, {"shipment": shipment}


def load_shipment(tracking_id: str, *, force_refresh: bool = False) -> Shipment:
    """Return the shipment for *tracking_id*, served from cache when fresh."""
    key = (tracking_id or "").strip()
    now = time.time()
    with _SHIPMENT_CACHE_LOCK:
        entry = _SHIPMENT_CACHE.get(key)
        if entry and not force_refresh and now - entry.fetched_at < config.shipment_cache_ttl():
            return entry.shipment
    ok, payload = fetch_shipment(key)
    if not ok:
        code = payload.get("error")
        if code in ("not_found", "tracking_id_required"):
            raise ShipmentNotFoundError(key)
        raise ShipmentUnavailableError(str(code))
    shipment: Shipment = payload["shipment"]
    with _SHIPMENT_CACHE_LOCK:
        _SHIPMENT_CACHE[key] = _ShipmentCacheEntry(shipment=shipment, fetched_at=time.time())
    return shipment


def push_shipment_image(tracking_id: str, cloud_id: str, url: str) -> Tuple[bool, Dict[str, Any]]:
    """Register an uploaded media asset against a shipment."""
    target = (tracking_id or "").strip()
    if not target:
        return False, {"error": "tracking_id_required"}
    endpoint = _api_url(f"{_shipment_path(target)}/images")
    if not endpoint:
        return False, {"error": "not_configured"}
    body = {"cloudId": cloud_id, "url": url}
    try:
        r = requests.post(endpoint, json=body, headers=_api_headers(), timeout=WRITE_TIMEOUT)
    except requests.RequestException as exc:
        LOG.warning("push_shipment_image failed tracking_id=%s error=%s", target, exc)
        return False, {"error": "request_failed", "details": str(exc)}
    data = _parse_response(r)
    if r.status_code == 404:
        return False, {"error": "not_found"}
    if r.status_code not in (200, 201):
        return False, {"error": "http_error", "status": r.status_code, "details": data}
    invalidate_cache(target)
    LOG.info("image registered tracking_id=%s cloud_id=%s", target, cloud_id)
    return True, data if isinstance(data, dict) else {"status": "created"}


def remove_shipment_image(tracking_id: str, image_id: str) -> Tuple[bool, Dict[str, Any]]:
    """Remove an image reference from a shipment."""
    target = (tracking_id or "").strip()
    if not target:
        return False, {"error": "tracking_id_required"}
    uid = (image_id or "").strip()
    if not uid:
        return False, {"error": "image_id_required"}
    endpoint = _api_url(f"{_shipment_path(target)}/images/{quote(uid, safe='')}")
    if not endpoint:
        return False, {"error": "not_configured"}
    try:
        r = requests.delete(endpoint, headers=_api_headers(), timeout=WRITE_TIMEOUT)
    except requests.RequestException as exc:
        LOG.warning("remove_shipment_image failed tracking_id=%s image_id=%s error=%s", target, uid, exc)
        return False, {"error": "request_failed", "details": str(exc)}
    data = _parse_response(r)
    if r.status_code == 404:
        # Treat as already-gone.
        invalidate_cache(target)
        return True, {"status": "not_found"}
    if r.status_code not in (200, 202, 204):
        return False, {"error": "http_error", "status": r.status_code, "details": data}
    invalidate_cache(target)
    LOG.info("image removed tracking_id=%s image_id=%s", target, uid)
    return True, data if isinstance(data, dict) else {"status": "deleted"}


__all__ = [
    "Shipment",
    "ShipmentImage",
    "ShipmentNotFoundError",
    "ShipmentUnavailableError",
    "fetch_shipment",
    "load_shipment",
    "push_shipment_image",
    "remove_shipment_image",
    "invalidate_cache",
]
