"""
Vendor Name Cache
==================

Process-local, mutually-exclusive map from a vendor lookup key (a full
BSSID or an ``XX:XX:XX`` OUI prefix) to a resolved vendor name.

The cache is the only mutable state shared between concurrent vendor
resolutions.  It holds successful names and the definitive
``"Unknown Vendor"`` answer; it never holds the failure sentinel, so a
failed lookup is always retried on the next call.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from airscope.core.models import UNKNOWN_VENDOR

# Returned by the resolver's callers for display only; never stored.
LOOKUP_FAILED = "Lookup failed"


class VendorCache:
    """``asyncio.Lock``-guarded vendor name store.

    Args:
        negative_ttl: Lifetime in seconds of cached ``"Unknown Vendor"``
            entries.  ``0`` (the default) keeps them permanently.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        negative_ttl: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[str, Optional[float]]] = {}
        self._lock = asyncio.Lock()
        self._negative_ttl = negative_ttl
        self._clock = clock

    async def get(self, key: str) -> Optional[str]:
        """Return the cached name for *key*, or ``None``."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            name, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            return name

    async def set(self, key: str, name: str) -> None:
        """Store *name* under *key*, overwriting any previous value.

        Raises:
            ValueError: If *name* is empty or the failure sentinel.
        """
        if not name or name == LOOKUP_FAILED:
            raise ValueError(f"Refusing to cache vendor name {name!r} for {key!r}")

        expires_at: Optional[float] = None
        if name == UNKNOWN_VENDOR and self._negative_ttl > 0:
            expires_at = self._clock() + self._negative_ttl

        async with self._lock:
            self._entries[key] = (name, expires_at)

    async def size(self) -> int:
        async with self._lock:
            return len(self._entries)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
