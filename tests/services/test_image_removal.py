"""Tests for the two-step image removal control."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from shiptrack.services import image_removal
from shiptrack.services.image_removal import RemovalControl, RemovalState

DELAY = 0.8


class FakeRemover:
    def __init__(self, ok: bool = True):
        self.ok = ok
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, tracking_id: str, image_id: str) -> Tuple[bool, Dict[str, Any]]:
        self.calls.append((tracking_id, image_id))
        if self.ok:
            return True, {"status": "deleted"}
        return False, {"error": "http_error", "status": 500}


@pytest.fixture(autouse=True)
def clear_controls():
    image_removal.CONTROLS.clear()
    yield
    image_removal.CONTROLS.clear()


def _press(remover: FakeRemover, now: float) -> RemovalControl:
    return image_removal.press("panel", "T1", "img-1", now=now, delay=DELAY, remover=remover)


def test_single_press_enters_confirming_without_removal():
    remover = FakeRemover()

    control = _press(remover, now=100.0)

    assert control.state is RemovalState.CONFIRMING
    assert control.label == "Please wait..."
    assert control.shows_cancel is False
    assert remover.calls == []


def test_press_before_delay_restarts_wait_without_removal():
    remover = FakeRemover()
    _press(remover, now=100.0)

    control = _press(remover, now=100.5)

    assert control.state is RemovalState.CONFIRMING
    assert control.since == 100.5
    assert remover.calls == []


def test_delay_elapsed_allows_delete_and_shows_cancel():
    remover = FakeRemover()
    _press(remover, now=100.0)

    control = image_removal.load_control("panel", "T1", "img-1", now=100.0 + DELAY + 0.01, delay=DELAY)

    assert control.state is RemovalState.ALLOW_DELETE
    assert control.label == "Confirm Delete"
    assert control.shows_cancel is True


def test_press_wait_press_removes_once_with_image_id():
    remover = FakeRemover()
    _press(remover, now=100.0)

    control = _press(remover, now=101.0)

    assert remover.calls == [("T1", "img-1")]
    assert control.state is RemovalState.IDLE
    assert len(image_removal.CONTROLS) == 0


def test_failed_removal_returns_to_confirm_delete_without_error_state():
    remover = FakeRemover(ok=False)
    _press(remover, now=100.0)

    control = _press(remover, now=101.0)

    assert remover.calls == [("T1", "img-1")]
    assert control.state is RemovalState.ALLOW_DELETE
    assert control.label == "Confirm Delete"


@pytest.mark.parametrize("cancel_at", [100.1, 105.0])
def test_cancel_before_or_after_delay_never_removes(cancel_at):
    remover = FakeRemover()
    _press(remover, now=100.0)
    image_removal.load_control("panel", "T1", "img-1", now=cancel_at, delay=DELAY)

    control = image_removal.cancel("panel", "T1", "img-1")

    assert control.state is RemovalState.IDLE
    assert control.label == "Delete"
    assert remover.calls == []
    follow_up = _press(remover, now=cancel_at + 10)
    assert follow_up.state is RemovalState.CONFIRMING
    assert remover.calls == []


def test_controls_are_independent_per_image():
    remover = FakeRemover()
    _press(remover, now=100.0)

    other = image_removal.load_control("panel", "T1", "img-2", now=101.0, delay=DELAY)

    assert other.state is RemovalState.IDLE


def test_pure_transitions():
    idle = RemovalControl()
    confirming, dispatch = idle.press(10.0)
    assert dispatch is False
    assert confirming.elapse(10.5, DELAY) is confirming
    allowed = confirming.elapse(10.9, DELAY)
    assert allowed.state is RemovalState.ALLOW_DELETE

    removing, dispatch = allowed.press(11.0)
    assert dispatch is True
    assert removing.label == "Removing..."
    assert removing.press(11.1) == (removing, False)
    assert removing.cancel() is removing
    assert removing.finish(True, 11.2) == RemovalControl()
    assert removing.finish(False, 11.2).state is RemovalState.ALLOW_DELETE


def test_describe_reports_remaining_wait():
    confirming, _ = RemovalControl().press(10.0)

    view = confirming.describe(10.3, DELAY)

    assert view["state"] == "confirming"
    assert view["cancel"] is False
    assert view["ready_in"] == pytest.approx(0.5)


def test_labels_are_marked_for_translation():
    for state, label in image_removal.LABELS.items():
        assert not isinstance(label, str)
        assert RemovalControl(state).label == str(label)
    assert isinstance(RemovalControl().label, str)
