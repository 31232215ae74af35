"""
AirScope Async Network Client
==============================

Async HTTP client built on **httpx** for the vendor-lookup endpoint.

Retry and caching policy is status-specific and therefore lives with
the caller (:mod:`airscope.collectors.vendor_resolver`); this client is
responsible for connection reuse, default headers, the per-request
timeout, and for folding every transport-level failure into a single
exception type.

References:
    - HTTPX documentation. https://www.python-httpx.org/
    - Fielding, R. et al. (2022). RFC 9110 -- HTTP Semantics.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger("airscope.network")


class ScopeHTTPError(Exception):
    """Transport, timeout, or protocol failure on an outbound request.

    HTTP error *statuses* are not raised; callers inspect
    :attr:`httpx.Response.status_code` themselves.
    """

    pass


class ScopeHTTP:
    """Async HTTP client with a shared connection pool.

    Usage::

        async with ScopeHTTP(base_url="https://api.macvendors.com/") as http:
            response = await http.get("00:11:22:33:44:55")
            if response.status_code == 200:
                print(response.text)

    Args:
        base_url:   Base URL prepended to all relative paths.
        timeout:    Per-request timeout in seconds.
        headers:    Default HTTP headers merged into every request.
        user_agent: User-Agent header value.
        transport:  Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        user_agent: str = "AirScope/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout

        default_headers = {"User-Agent": user_agent, "Accept": "text/plain"}
        if headers:
            default_headers.update(headers)

        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=default_headers,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> ScopeHTTP:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Gracefully close the underlying httpx client."""
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Issue a single GET request.

        Args:
            url:     Path relative to *base_url*, or an absolute URL.
            params:  Query-string parameters.
            headers: Per-request headers merged with the defaults.

        Returns:
            The :class:`httpx.Response`, whatever its status code.

        Raises:
            ScopeHTTPError: On timeout, connection, or protocol failure.
        """
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            logger.debug("Timeout after %.1fs on GET %s", self._timeout, url)
            raise ScopeHTTPError(f"Timed out requesting {url}") from exc
        except httpx.HTTPError as exc:
            logger.debug("Transport error on GET %s: %s", url, exc)
            raise ScopeHTTPError(f"Request to {url} failed: {exc}") from exc

        logger.debug("GET %s -> %d", url, response.status_code)
        return response
