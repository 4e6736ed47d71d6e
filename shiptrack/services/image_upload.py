"""Shipment image upload workflow.

A visitor's upload draft is one of four variants:

    Idle                      nothing selected
    Selected(file)            a file is waiting to be submitted
    Uploading(file)           submit in progress
    Failed(error, file)       last submit failed; ``file`` is kept when the
                              failure happened on the network side

``submit`` performs the two-step write: upload to the media host, then
register the returned asset with the shipment API. Both failures collapse
to the same ``upload_failed`` code.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from flask_babel import lazy_gettext as _l

from shiptrack import config
from shiptrack.config import MediaHostSettings
from shiptrack.services import media_host, shipments_api
from shiptrack.services.panel_state import StateStore
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.image_upload")

ERROR_FILE_MISSING = "file_missing"
ERROR_UPLOAD_FAILED = "upload_failed"

ERROR_MESSAGES = {
    ERROR_FILE_MISSING: _l("Please choose a file"),
    ERROR_UPLOAD_FAILED: _l("Something went wrong"),
}


@dataclass(frozen=True)
class PendingFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class Idle:
    kind = "idle"


@dataclass(frozen=True)
class Selected:
    file: PendingFile
    kind = "selected"


@dataclass(frozen=True)
class Uploading:
    file: PendingFile
    kind = "uploading"


@dataclass(frozen=True)
class Failed:
    error: str
    file: Optional[PendingFile] = None
    kind = "failed"

    @property
    def message(self) -> str:
        return str(ERROR_MESSAGES.get(self.error, ERROR_MESSAGES[ERROR_UPLOAD_FAILED]))


Draft = Union[Idle, Selected, Uploading, Failed]

Uploader = Callable[..., Tuple[bool, Dict[str, Any]]]
Pusher = Callable[[str, str, str], Tuple[bool, Dict[str, Any]]]

DRAFTS: StateStore[Draft] = StateStore("upload_drafts")


def pending_file(draft: Draft) -> Optional[PendingFile]:
    return getattr(draft, "file", None)


def is_loading(draft: Draft) -> bool:
    return isinstance(draft, Uploading)


def error_message(draft: Draft) -> Optional[str]:
    return draft.message if isinstance(draft, Failed) else None


def select_file(draft: Draft, file: Optional[PendingFile]) -> Draft:
    """Replace the pending file and clear any error."""
    if file is None:
        return Idle()
    return Selected(file=file)


def submit(
    draft: Draft,
    tracking_id: str,
    *,
    settings: Optional[MediaHostSettings] = None,
    uploader: Optional[Uploader] = None,
    pusher: Optional[Pusher] = None,
    on_uploading: Optional[Callable[[Draft], None]] = None,
) -> Draft:
    """Upload the pending file and attach it to the shipment.

    ``on_uploading`` receives the intermediate ``Uploading`` draft before
    any network call so callers can publish it.
    """
    file = pending_file(draft)
    if file is None:
        return Failed(error=ERROR_FILE_MISSING)

    upload = uploader or media_host.upload_image
    push = pusher or shipments_api.push_shipment_image
    cfg = settings or config.media_host_settings()

    in_flight = Uploading(file=file)
    if on_uploading is not None:
        on_uploading(in_flight)

    ok, payload = upload(file.filename, file.content, file.content_type, settings=cfg)
    if not ok:
        LOG.warning(
            "image upload failed at media host tracking_id=%s filename=%s error=%s",
            tracking_id,
            file.filename,
            payload.get("error"),
        )
        return Failed(error=ERROR_UPLOAD_FAILED, file=file)

    asset: media_host.MediaAsset = payload["asset"]
    ok, payload = push(tracking_id, asset.public_id, asset.secure_url)
    if not ok:
        LOG.warning(
            "image registration failed at shipment api tracking_id=%s cloud_id=%s error=%s",
            tracking_id,
            asset.public_id,
            payload.get("error"),
        )
        return Failed(error=ERROR_UPLOAD_FAILED, file=file)

    LOG.info("image attached tracking_id=%s cloud_id=%s", tracking_id, asset.public_id)
    return Idle()


def draft_key(panel_id: str, tracking_id: str) -> Tuple[str, str]:
    return (panel_id, tracking_id)


def load_draft(panel_id: str, tracking_id: str) -> Draft:
    return DRAFTS.get(draft_key(panel_id, tracking_id)) or Idle()


def store_draft(panel_id: str, tracking_id: str, draft: Draft) -> None:
    key = draft_key(panel_id, tracking_id)
    if isinstance(draft, Idle):
        DRAFTS.discard(key)
    else:
        DRAFTS.put(key, draft)


def describe(draft: Draft) -> Dict[str, Any]:
    file = pending_file(draft)
    return {
        "state": draft.kind,
        "loading": is_loading(draft),
        "file": {"name": file.filename, "size": file.size} if file else None,
        "error": draft.error if isinstance(draft, Failed) else None,
        "message": error_message(draft),
    }


__all__ = [
    "PendingFile",
    "Idle",
    "Selected",
    "Uploading",
    "Failed",
    "Draft",
    "DRAFTS",
    "ERROR_FILE_MISSING",
    "ERROR_UPLOAD_FAILED",
    "ERROR_MESSAGES",
    "pending_file",
    "is_loading",
    "error_message",
    "select_file",
    "submit",
    "load_draft",
    "store_draft",
    "describe",
]
