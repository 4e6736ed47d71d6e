"""Media host integration (unsigned image uploads).

The media host accepts a multipart POST with ``file`` and ``upload_preset``
fields at a public endpoint and answers with JSON describing the stored
asset. Only ``public_id`` and ``secure_url`` are consumed here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Optional, Tuple, Union

import requests

from shiptrack import config
from shiptrack.config import MediaHostSettings
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.media_host")

UPLOAD_TIMEOUT = 60


@dataclass(frozen=True)
class MediaAsset:
    public_id: str
    secure_url: str

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> Optional["MediaAsset"]:
        public_id = data.get("public_id")
        secure_url = data.get("secure_url")
        if not isinstance(public_id, str) or not public_id.strip():
            return None
        if not isinstance(secure_url, str) or not secure_url.strip():
            return None
        return cls(public_id=public_id.strip(), secure_url=secure_url.strip())


def upload_image(
    filename: str,
    content: Union[bytes, BinaryIO],
    content_type: Optional[str] = None,
    *,
    settings: Optional[MediaHostSettings] = None,
    timeout: int = UPLOAD_TIMEOUT,
) -> Tuple[bool, Dict[str, Any]]:
    """Upload one file to the media host.

    Returns ``(True, {"asset": MediaAsset, "raw": <reply>})`` on success or
    ``(False, {"error": <code>, ...})``. Never raises for network problems.
    """
    cfg = settings or config.media_host_settings()
    if not cfg.configured:
        return False, {"error": "not_configured"}
    file_tuple = (filename or "upload", content, content_type or "application/octet-stream")
    try:
        r = requests.post(
            cfg.public_url,  # type: ignore[arg-type]
            data={"upload_preset": cfg.upload_preset},
            files={"file": file_tuple},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        LOG.warning("media upload request failed filename=%s error=%s", filename, exc)
        return False, {"error": "request_failed", "details": str(exc)}
    try:
        data = r.json()
    except ValueError:
        data = {"raw": r.text}
    if r.status_code not in (200, 201):
        LOG.warning("media upload rejected filename=%s status=%s", filename, r.status_code)
        return False, {"error": "http_error", "status": r.status_code, "details": data}
    if not isinstance(data, dict):
        return False, {"error": "invalid_json"}
    asset = MediaAsset.from_payload(data)
    if asset is None:
        LOG.warning("media upload reply missing asset fields filename=%s", filename)
        return False, {"error": "invalid_payload", "details": data}
    LOG.info("media upload stored public_id=%s", asset.public_id)
    return True, {"asset": asset, "raw": data}


__all__ = ["MediaAsset", "upload_image", "UPLOAD_TIMEOUT"]
