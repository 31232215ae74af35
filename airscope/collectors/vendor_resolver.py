"""
Vendor Resolver
================

Resolves a BSSID (or OUI prefix) to a manufacturer name through an
external lookup service, with a shared :class:`VendorCache` in front of
it and a status-specific retry policy behind it.

Retry policy:

    +---------------------------+-------------------------------+---------+
    | Outcome                   | Action                        | Cached  |
    +===========================+===============================+=========+
    | 200                       | return stripped body          | yes     |
    | 404                       | return ``"Unknown Vendor"``   | yes     |
    | 429                       | sleep ``backoff * attempt``   | no      |
    | other status / transport  | sleep ``transient_backoff``   | no      |
    +---------------------------+-------------------------------+---------+

Both failure classes draw on one retry budget. Once it is spent the
resolver returns ``""``; callers may display that as ``"Lookup failed"``.

References:
    - macvendors.com API. https://macvendors.com/api
    - RFC 6585, Section 4: 429 Too Many Requests.
"""

from __future__ import annotations

import abc
import asyncio
from typing import Awaitable, Callable, Optional
from urllib.parse import quote

from shared.config import LookupConfig
from shared.logger import ScopeLogger
from shared.network import ScopeHTTP, ScopeHTTPError

from airscope.collectors.vendor_cache import VendorCache
from airscope.core.models import UNKNOWN_VENDOR
from airscope.parsers.oui import lookup_oui

logger = ScopeLogger("airscope.collectors.resolver")

HTTP_OK = 200
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429


# ---------------------------------------------------------------------------
# Lookup collaborators
# ---------------------------------------------------------------------------


class VendorLookup(abc.ABC):
    """One round-trip to a vendor lookup service."""

    @abc.abstractmethod
    async def lookup(self, identifier: str) -> tuple[int, str]:
        """Query the service for *identifier*.

        Returns:
            ``(status_code, body_text)``.

        Raises:
            ScopeHTTPError: On transport failure or timeout.
        """

    async def close(self) -> None:
        """Release any held resources."""


class MacVendorsLookup(VendorLookup):
    """Lookup against the macvendors.com plain-text API.

    Args:
        http: Open :class:`ScopeHTTP` client whose base URL points at
            the service root.
    """

    def __init__(self, http: ScopeHTTP) -> None:
        self._http = http

    @classmethod
    def from_config(
        cls,
        config: LookupConfig,
        transport=None,
    ) -> MacVendorsLookup:
        http = ScopeHTTP(
            base_url=config.base_url,
            timeout=config.timeout,
            user_agent=config.user_agent,
            transport=transport,
        )
        return cls(http)

    async def lookup(self, identifier: str) -> tuple[int, str]:
        # Leading slash keeps "aa:bb:..." from being read as a URL scheme.
        response = await self._http.get(f"/{quote(identifier, safe=':-.')}")
        return response.status_code, response.text

    async def close(self) -> None:
        await self._http.close()


class OfflineVendorLookup(VendorLookup):
    """Answers from the built-in OUI table without touching the network."""

    async def lookup(self, identifier: str) -> tuple[int, str]:
        name = lookup_oui(identifier)
        if name is None:
            return HTTP_NOT_FOUND, ""
        return HTTP_OK, name


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class VendorResolver:
    """Cache-first vendor resolution with bounded retries.

    Usage::

        resolver = VendorResolver(MacVendorsLookup.from_config(cfg), VendorCache())
        name = await resolver.resolve("a4:83:e7:00:00:01")

    Args:
        lookup: Service collaborator.
        cache: Shared vendor cache.
        max_retries: Retries after the first attempt, shared by 429 and
            transient failures.
        rate_limit_backoff: Base of the linear 429 backoff, in seconds.
        transient_backoff: Fixed wait after other failures, in seconds.
        sleep: Coroutine used for backoff waits.
    """

    def __init__(
        self,
        lookup: VendorLookup,
        cache: VendorCache,
        *,
        max_retries: int = 2,
        rate_limit_backoff: float = 1.0,
        transient_backoff: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._lookup = lookup
        self._cache = cache
        self._max_retries = max_retries
        self._rate_limit_backoff = rate_limit_backoff
        self._transient_backoff = transient_backoff
        self._sleep = sleep
        self._inflight: dict[str, asyncio.Future] = {}

    @classmethod
    def from_config(
        cls,
        lookup: VendorLookup,
        cache: VendorCache,
        config: LookupConfig,
    ) -> VendorResolver:
        return cls(
            lookup,
            cache,
            max_retries=config.max_retries,
            rate_limit_backoff=config.rate_limit_backoff,
            transient_backoff=config.transient_backoff,
        )

    @property
    def cache(self) -> VendorCache:
        return self._cache

    async def resolve(self, identifier: Optional[str]) -> str:
        """Resolve *identifier* to a vendor name.

        Concurrent calls for the same identifier share one lookup: the
        first caller queries the service, the others wait for its result.

        Returns:
            The vendor name, ``"Unknown Vendor"`` when the service has
            no match, or ``""`` for an empty identifier or an exhausted
            retry budget.
        """
        if not identifier:
            return ""

        while True:
            cached = await self._cache.get(identifier)
            if cached is not None:
                logger.debug("Cache hit for %s", identifier)
                return cached

            pending = self._inflight.get(identifier)
            if pending is None:
                break
            logger.debug("Joining in-flight lookup for %s", identifier)
            name = await asyncio.shield(pending)
            if name is not None:
                return name
            # The owning call was cancelled before it finished; take over.

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._inflight[identifier] = future
        name = None
        try:
            name = await self._fetch(identifier)
        finally:
            del self._inflight[identifier]
            future.set_result(name)
        return name

    async def _fetch(self, identifier: str) -> str:
        attempt = 0
        while True:
            try:
                status, body = await self._lookup.lookup(identifier)
            except ScopeHTTPError as exc:
                status, body = None, ""
                logger.debug("Lookup for %s failed: %s", identifier, exc)

            if status == HTTP_OK:
                name = body.strip()
                if not name:
                    # An empty 200 cannot be cached; treat it as a miss.
                    name = UNKNOWN_VENDOR
                await self._cache.set(identifier, name)
                return name

            if status == HTTP_NOT_FOUND:
                await self._cache.set(identifier, UNKNOWN_VENDOR)
                return UNKNOWN_VENDOR

            if attempt >= self._max_retries:
                break
            attempt += 1

            if status == HTTP_TOO_MANY_REQUESTS:
                delay = self._rate_limit_backoff * attempt
                logger.debug(
                    "Rate limited on %s, retry %d in %.1fs",
                    identifier, attempt, delay,
                )
            else:
                delay = self._transient_backoff
                logger.debug(
                    "Transient failure (status=%s) on %s, retry %d in %.1fs",
                    status, identifier, attempt, delay,
                )
            await self._sleep(delay)

        logger.warning("Vendor lookup for %s gave up after retries", identifier)
        return ""
