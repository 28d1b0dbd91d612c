"""Fingerprint-keyed memoization for recomputed garden views.

Keys are SHA-256 digests of canonical JSON, so two calls over an unchanged
population map to the same entry regardless of dict ordering.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from datetime import date
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not fingerprintable")


def fingerprint(data: Any) -> str:
    """SHA-256 of canonical JSON. Dates and datetimes are rendered ISO 8601."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=_default)
    return hashlib.sha256(canonical.encode()).hexdigest()


class FingerprintCache:
    """Thread-safe LRU cache keyed by fingerprint strings.

    A ``maxsize`` of 0 or less disables storage; every lookup recomputes.
    """

    def __init__(self, maxsize: int = 32) -> None:
        self._maxsize = maxsize
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return self._entries[key]
            self.misses += 1

        # Computed outside the lock; concurrent misses on one key may both compute.
        value = compute()

        if self._maxsize <= 0:
            return value
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self._maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Memo cache evicted %s", evicted[:12])
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
