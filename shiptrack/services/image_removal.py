"""Two-step image removal control.

Each rendered image owns one control. The control is a plain value; every
transition returns a new value and time only enters as an argument, so
no timer is involved:

    idle --press--> confirming --elapse(delay)--> allow_delete --press--> removing
    confirming/allow_delete --cancel--> idle
    removing --finish(ok)--> idle
    removing --finish(failed)--> allow_delete

Only the press from ``allow_delete`` dispatches the delete call.
"""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from flask_babel import lazy_gettext as _l

from shiptrack import config
from shiptrack.services import shipments_api
from shiptrack.services.panel_state import StateStore
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.image_removal")


class RemovalState(str, enum.Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    ALLOW_DELETE = "allow_delete"
    REMOVING = "removing"


LABELS = {
    RemovalState.IDLE: _l("Delete"),
    RemovalState.CONFIRMING: _l("Please wait..."),
    RemovalState.ALLOW_DELETE: _l("Confirm Delete"),
    RemovalState.REMOVING: _l("Removing..."),
}


@dataclass(frozen=True)
class RemovalControl:
    state: RemovalState = RemovalState.IDLE
    since: Optional[float] = None

    def press(self, now: float) -> Tuple["RemovalControl", bool]:
        """Handle a click on the main button. Returns (next, dispatch_delete)."""
        if self.state is RemovalState.ALLOW_DELETE:
            return RemovalControl(RemovalState.REMOVING, now), True
        if self.state is RemovalState.REMOVING:
            return self, False
        return RemovalControl(RemovalState.CONFIRMING, now), False

    def elapse(self, now: float, delay: float) -> "RemovalControl":
        if self.state is RemovalState.CONFIRMING and self.since is not None and now - self.since >= delay:
            return RemovalControl(RemovalState.ALLOW_DELETE, now)
        return self

    def cancel(self) -> "RemovalControl":
        if self.state is RemovalState.REMOVING:
            return self
        return RemovalControl()

    def finish(self, ok: bool, now: float) -> "RemovalControl":
        if self.state is not RemovalState.REMOVING:
            return self
        if ok:
            return RemovalControl()
        return RemovalControl(RemovalState.ALLOW_DELETE, now)

    @property
    def label(self) -> str:
        return str(LABELS[self.state])

    @property
    def shows_cancel(self) -> bool:
        return self.state is RemovalState.ALLOW_DELETE

    def ready_in(self, now: float, delay: float) -> float:
        if self.state is not RemovalState.CONFIRMING or self.since is None:
            return 0.0
        return max(0.0, delay - (now - self.since))

    def describe(self, now: float, delay: float) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "label": self.label,
            "cancel": self.shows_cancel,
            "ready_in": round(self.ready_in(now, delay), 3),
        }


Remover = Callable[[str, str], Tuple[bool, Dict[str, Any]]]

CONTROLS: StateStore[RemovalControl] = StateStore("removal_controls")


def control_key(panel_id: str, tracking_id: str, image_id: str) -> Tuple[str, str, str]:
    return (panel_id, tracking_id, image_id)


def load_control(
    panel_id: str,
    tracking_id: str,
    image_id: str,
    *,
    now: Optional[float] = None,
    delay: Optional[float] = None,
) -> RemovalControl:
    """Return the stored control with any due delay transition applied."""
    control = CONTROLS.get(control_key(panel_id, tracking_id, image_id)) or RemovalControl()
    current = time.time() if now is None else now
    wait = config.delete_confirm_delay() if delay is None else delay
    return control.elapse(current, wait)


def store_control(panel_id: str, tracking_id: str, image_id: str, control: RemovalControl) -> None:
    key = control_key(panel_id, tracking_id, image_id)
    if control.state is RemovalState.IDLE:
        CONTROLS.discard(key)
    else:
        CONTROLS.put(key, control)


def press(
    panel_id: str,
    tracking_id: str,
    image_id: str,
    *,
    now: Optional[float] = None,
    delay: Optional[float] = None,
    remover: Optional[Remover] = None,
) -> RemovalControl:
    """Apply a click on an image's delete button and dispatch removal when allowed."""
    current = time.time() if now is None else now
    control = load_control(panel_id, tracking_id, image_id, now=current, delay=delay)
    control, dispatch = control.press(current)
    store_control(panel_id, tracking_id, image_id, control)
    if not dispatch:
        return control

    remove = remover or shipments_api.remove_shipment_image
    ok, payload = remove(tracking_id, image_id)
    if not ok:
        LOG.warning(
            "image removal failed tracking_id=%s image_id=%s error=%s",
            tracking_id,
            image_id,
            payload.get("error"),
        )
    control = control.finish(ok, current)
    store_control(panel_id, tracking_id, image_id, control)
    return control


def cancel(panel_id: str, tracking_id: str, image_id: str) -> RemovalControl:
    control = CONTROLS.get(control_key(panel_id, tracking_id, image_id)) or RemovalControl()
    control = control.cancel()
    store_control(panel_id, tracking_id, image_id, control)
    return control


__all__ = [
    "RemovalState",
    "RemovalControl",
    "LABELS",
    "CONTROLS",
    "load_control",
    "store_control",
    "press",
    "cancel",
]
