"""Process-local holders for ephemeral admin panel state.

Upload drafts and removal controls only live for the duration of a
visitor's admin session. They are keyed by the visitor's panel id plus
the shipment (and image) they belong to, and expire after a period of
inactivity.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from shiptrack import config
from shiptrack.utils.logging import get_logger

LOG = get_logger("shiptrack.panel_state")

T = TypeVar("T")
Key = Tuple[Hashable, ...]


@dataclass
class _Slot(Generic[T]):
    value: T
    touched_at: float


class StateStore(Generic[T]):
    """Thread-safe key -> value map with idle expiry."""

    def __init__(self, name: str, ttl: Optional[Callable[[], float]] = None) -> None:
        self.name = name
        self._ttl = ttl or config.panel_state_ttl
        self._slots: Dict[Key, _Slot[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: Key, default: Optional[T] = None) -> Optional[T]:
        now = time.time()
        with self._lock:
            slot = self._slots.get(key)
            if slot is None:
                return default
            if now - slot.touched_at > self._ttl():
                del self._slots[key]
                return default
            return slot.value

    def put(self, key: Key, value: T) -> None:
        now = time.time()
        with self._lock:
            self._slots[key] = _Slot(value=value, touched_at=now)
            self._prune_locked(now)

    def discard(self, key: Key) -> None:
        with self._lock:
            self._slots.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def _prune_locked(self, now: float) -> None:
        ttl = self._ttl()
        stale = [k for k, slot in self._slots.items() if now - slot.touched_at > ttl]
        for key in stale:
            del self._slots[key]
        if stale:
            LOG.debug("pruned %s idle entries from %s", len(stale), self.name)


__all__ = ["StateStore"]
