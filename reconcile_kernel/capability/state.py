"""
Shared State Store: which resource kinds currently exist.

Written by the capability watcher, read by anyone. Every read and write is
serialized by one lock; keys update independently, so a reader may see part
of a poll's results before the rest.
"""

import threading
from typing import Dict, Optional


class SharedStateStore:
    """Thread-safe mapping from capability key to availability."""

    def __init__(self):
        self._lock = threading.Lock()
        self._state: Dict[str, bool] = {}

    def get_state(self, key: str) -> bool:
        """Availability of ``key``; unseen keys are unavailable."""
        with self._lock:
            return self._state.get(key, False)

    def set_state(self, key: str, value: bool) -> None:
        with self._lock:
            self._state[key] = bool(value)

    def snapshot(self) -> Dict[str, bool]:
        with self._lock:
            return dict(self._state)


_default_store: Optional[SharedStateStore] = None
_default_store_lock = threading.Lock()


def get_state_store() -> SharedStateStore:
    """The process-wide store, created on first use."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = SharedStateStore()
        return _default_store
