from __future__ import annotations

import threading

from .interfaces import StoreKey


class KeyLockRegistry:
    """
    Provides a stable lock per store key so transactions on different keys never contend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[StoreKey, threading.Lock] = {}

    def lock_for(self, key: StoreKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock
