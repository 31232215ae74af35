"""Tests for vendor resolution, retry policy and lookup collaborators."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from airscope.collectors.vendor_cache import VendorCache
from airscope.collectors.vendor_resolver import (
    MacVendorsLookup,
    OfflineVendorLookup,
    VendorResolver,
)
from shared.config import LookupConfig

BSSID = "a4:83:e7:00:00:01"


def _resolver(lookup, sleep, cache=None, **kwargs):
    return VendorResolver(lookup, cache or VendorCache(), sleep=sleep, **kwargs)


class TestResolve:
    def test_empty_identifier(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls()
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            return (
                await resolver.resolve(""),
                await resolver.resolve(None),
                await resolver.cache.size(),
            )

        assert asyncio.run(scenario()) == ("", "", 0)
        assert lookup.calls == []

    def test_success_is_cached(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(200, "  Apple, Inc.\n")]})
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            return await resolver.resolve(BSSID), await resolver.resolve(BSSID)

        assert asyncio.run(scenario()) == ("Apple, Inc.", "Apple, Inc.")
        assert lookup.calls == [BSSID]

    def test_not_found_is_cached(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(404, '{"errors":{"detail":"Not Found"}}')]})
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            first = await resolver.resolve(BSSID)
            second = await resolver.resolve(BSSID)
            return first, second, await resolver.cache.get(BSSID)

        assert asyncio.run(scenario()) == ("Unknown Vendor",) * 3
        assert lookup.calls == [BSSID]

    def test_rate_limit_then_success(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(429, ""), (429, ""), (200, "Acme")]})
        resolver = _resolver(lookup, recording_sleep)

        assert asyncio.run(resolver.resolve(BSSID)) == "Acme"
        assert recording_sleep.delays == [1.0, 2.0]
        assert len(lookup.calls) == 3

    def test_rate_limit_exhausted_not_cached(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(429, "")]})
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            return await resolver.resolve(BSSID), await resolver.cache.size()

        assert asyncio.run(scenario()) == ("", 0)
        assert recording_sleep.delays == [1.0, 2.0]
        assert len(lookup.calls) == 3

    def test_transient_status_exhausted(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(503, "")]})
        resolver = _resolver(lookup, recording_sleep)

        assert asyncio.run(resolver.resolve(BSSID)) == ""
        assert recording_sleep.delays == [0.5, 0.5]
        assert len(lookup.calls) == 3

    def test_transport_error_recovers(
        self, scripted_lookup_cls, recording_sleep, transport_error
    ):
        lookup = scripted_lookup_cls({BSSID: [transport_error, (200, "Acme")]})
        resolver = _resolver(lookup, recording_sleep)

        assert asyncio.run(resolver.resolve(BSSID)) == "Acme"
        assert recording_sleep.delays == [0.5]

    def test_failure_retried_on_next_call(
        self, scripted_lookup_cls, recording_sleep, transport_error
    ):
        lookup = scripted_lookup_cls(
            {BSSID: [transport_error, transport_error, transport_error, (200, "Acme")]}
        )
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            return await resolver.resolve(BSSID), await resolver.resolve(BSSID)

        assert asyncio.run(scenario()) == ("", "Acme")
        assert len(lookup.calls) == 4

    def test_cached_value_skips_lookup(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls()
        cache = VendorCache()
        resolver = _resolver(lookup, recording_sleep, cache=cache)

        async def scenario():
            await cache.set(BSSID, "Preloaded")
            return await resolver.resolve(BSSID)

        assert asyncio.run(scenario()) == "Preloaded"
        assert lookup.calls == []

    def test_custom_retry_budget(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(429, "")]})
        resolver = _resolver(
            lookup, recording_sleep, max_retries=1, rate_limit_backoff=0.25
        )
        assert asyncio.run(resolver.resolve(BSSID)) == ""
        assert recording_sleep.delays == [0.25]

    def test_mixed_failures_share_budget(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls(
            {BSSID: [(429, ""), (503, ""), (429, ""), (503, ""), (200, "Acme")]}
        )
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            return await resolver.resolve(BSSID), await resolver.cache.size()

        assert asyncio.run(scenario()) == ("", 0)
        assert len(lookup.calls) == 3
        assert recording_sleep.delays == [1.0, 0.5]

    def test_rate_limit_delay_counts_all_attempts(
        self, scripted_lookup_cls, recording_sleep, transport_error
    ):
        lookup = scripted_lookup_cls({BSSID: [transport_error, (429, ""), (200, "Acme")]})
        resolver = _resolver(lookup, recording_sleep)

        assert asyncio.run(resolver.resolve(BSSID)) == "Acme"
        assert recording_sleep.delays == [0.5, 2.0]

    def test_concurrent_calls_share_one_lookup(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(200, "Acme")]}, delays={BSSID: 0.05})
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            return await asyncio.gather(*(resolver.resolve(BSSID) for _ in range(3)))

        assert asyncio.run(scenario()) == ["Acme", "Acme", "Acme"]
        assert lookup.calls == [BSSID]

    def test_waiter_takes_over_cancelled_lookup(self, scripted_lookup_cls, recording_sleep):
        lookup = scripted_lookup_cls({BSSID: [(200, "Acme")]}, delays={BSSID: 0.05})
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            owner = asyncio.create_task(resolver.resolve(BSSID))
            await asyncio.sleep(0.01)
            waiter = asyncio.create_task(resolver.resolve(BSSID))
            await asyncio.sleep(0.01)
            owner.cancel()
            with pytest.raises(asyncio.CancelledError):
                await owner
            return await waiter

        assert asyncio.run(scenario()) == "Acme"
        assert lookup.calls == [BSSID, BSSID]

    def test_cancelled_waiter_leaves_lookup_running(
        self, scripted_lookup_cls, recording_sleep
    ):
        lookup = scripted_lookup_cls({BSSID: [(200, "Acme")]}, delays={BSSID: 0.05})
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            owner = asyncio.create_task(resolver.resolve(BSSID))
            await asyncio.sleep(0.01)
            waiter = asyncio.create_task(resolver.resolve(BSSID))
            await asyncio.sleep(0.01)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter
            return await owner

        assert asyncio.run(scenario()) == "Acme"
        assert lookup.calls == [BSSID]

    def test_from_config(self, scripted_lookup_cls):
        config = LookupConfig(max_retries=0)
        lookup = scripted_lookup_cls({BSSID: [(500, "")]})
        resolver = VendorResolver.from_config(lookup, VendorCache(), config)
        assert asyncio.run(resolver.resolve(BSSID)) == ""
        assert len(lookup.calls) == 1

    def test_cancelled_during_backoff_does_not_cache(self, scripted_lookup_cls):
        lookup = scripted_lookup_cls({BSSID: [(429, ""), (200, "Acme")]})
        cache = VendorCache()
        resolver = VendorResolver(lookup, cache, rate_limit_backoff=10.0)

        async def scenario():
            task = asyncio.create_task(resolver.resolve(BSSID))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return await cache.size()

        assert asyncio.run(scenario()) == 0
        assert lookup.calls == [BSSID]


class TestLookups:
    def test_offline_lookup(self):
        lookup = OfflineVendorLookup()

        async def scenario():
            return (
                await lookup.lookup("00:0b:86:11:22:33"),
                await lookup.lookup("12:34:56:00:00:01"),
            )

        assert asyncio.run(scenario()) == ((200, "Aruba Networks"), (404, ""))

    def test_macvendors_request_path(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="Apple, Inc.")

        lookup = MacVendorsLookup.from_config(
            LookupConfig(base_url="https://api.example.test/"),
            transport=httpx.MockTransport(handler),
        )

        async def scenario():
            try:
                return await lookup.lookup(BSSID)
            finally:
                await lookup.close()

        assert asyncio.run(scenario()) == (200, "Apple, Inc.")
        assert seen[0].url.host == "api.example.test"
        assert seen[0].url.path == f"/{BSSID}"
        assert seen[0].headers["User-Agent"].startswith("AirScope/")

    def test_macvendors_through_resolver(self, recording_sleep):
        statuses = iter([429, 404])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses), text="")

        lookup = MacVendorsLookup.from_config(
            LookupConfig(), transport=httpx.MockTransport(handler)
        )
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            try:
                return await resolver.resolve(BSSID)
            finally:
                await lookup.close()

        assert asyncio.run(scenario()) == "Unknown Vendor"
        assert recording_sleep.delays == [1.0]

    def test_macvendors_transport_error(self, recording_sleep):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        lookup = MacVendorsLookup.from_config(
            LookupConfig(), transport=httpx.MockTransport(handler)
        )
        resolver = _resolver(lookup, recording_sleep)

        async def scenario():
            try:
                return await resolver.resolve(BSSID)
            finally:
                await lookup.close()

        assert asyncio.run(scenario()) == ""
        assert recording_sleep.delays == [0.5, 0.5]
