"""Per-product lock registry.

One ``threading.Lock`` per product id, created on first use. This is the
in-process half of the serialization point; the database row lock taken
by the unit of work is the cross-process half.
"""

from __future__ import annotations

import threading


class ProductLockRegistry:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def acquire(self, product_id: str, timeout: float) -> bool:
        """Block up to *timeout* seconds for the product's lock."""
        return self._lock_for(product_id).acquire(timeout=timeout)

    def release(self, product_id: str) -> None:
        self._lock_for(product_id).release()

    def _lock_for(self, product_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.Lock()
            return lock
