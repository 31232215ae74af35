"""
Scan Aggregator
================

Turns a list of raw scan records into vendor-enriched
:class:`NearbyWiFiNetwork` entries by resolving every BSSID
concurrently.

Each resolution runs as its own asyncio task tagged with the record's
position in the scan.  Results are gathered in completion order and
re-sorted by that position, so the output always follows the scan
order whatever the lookup latencies.

For large scans the start of each lookup can be staggered across
``stagger_slots`` buckets of ``stagger_step`` seconds to keep bursts
under the lookup service's rate limit.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional, Sequence

from shared.config import ScanConfig
from shared.logger import ScopeLogger

from airscope.collectors.vendor_resolver import VendorResolver
from airscope.core.models import NearbyWiFiNetwork, ScannedNetworkRecord
from airscope.parsers.oui import oui_prefix

logger = ScopeLogger("airscope.collectors.aggregator")


class ScanAggregator:
    """Concurrent, order-preserving vendor enrichment of scan records.

    Args:
        resolver: Shared vendor resolver.
        stagger_step: Seconds between stagger slots.
        stagger_slots: Number of distinct start offsets.
        key_by_oui: Resolve by ``XX:XX:XX`` prefix instead of full BSSID.
    """

    def __init__(
        self,
        resolver: VendorResolver,
        *,
        stagger_step: float = 0.1,
        stagger_slots: int = 10,
        key_by_oui: bool = False,
    ) -> None:
        self._resolver = resolver
        self._stagger_step = stagger_step
        self._stagger_slots = max(1, stagger_slots)
        self._key_by_oui = key_by_oui

    @classmethod
    def from_config(cls, resolver: VendorResolver, config: ScanConfig) -> ScanAggregator:
        return cls(
            resolver,
            stagger_step=config.stagger_step,
            stagger_slots=config.stagger_slots,
            key_by_oui=config.key_by_oui,
        )

    def stagger_delay(self, index: int) -> float:
        """Start offset of the task for the record at scan position *index*."""
        return (index % self._stagger_slots) * self._stagger_step

    def lookup_key(self, bssid: str) -> str:
        """Cache and service key for *bssid* under the configured keying."""
        if self._key_by_oui:
            return oui_prefix(bssid) or bssid
        return bssid

    async def _resolve_one(
        self,
        index: int,
        record: ScannedNetworkRecord,
        connected_bssid: Optional[str],
        stagger: bool,
    ) -> tuple[int, NearbyWiFiNetwork]:
        if stagger:
            delay = self.stagger_delay(index)
            if delay > 0:
                await asyncio.sleep(delay)

        vendor = await self._resolver.resolve(self.lookup_key(record.bssid))
        return index, NearbyWiFiNetwork(
            ssid=record.ssid,
            bssid=record.bssid,
            vendor=vendor,
            channel=record.channel_number,
            band=record.band,
            phy_mode=record.phy_mode,
            rssi=record.rssi,
            is_connected=connected_bssid is not None and record.bssid == connected_bssid,
        )

    async def build_network_list(
        self,
        records: Iterable[ScannedNetworkRecord],
        connected_bssid: Optional[str],
        *,
        stagger: bool,
        require_ssid: bool = True,
    ) -> list[NearbyWiFiNetwork]:
        """Resolve vendors for every usable record, in scan order.

        Records with an empty BSSID are always dropped; with
        *require_ssid*, hidden (empty SSID) networks are dropped too.
        Cancelling the caller cancels every in-flight lookup and waits
        for them to unwind before propagating.

        Args:
            records: Scan records in scan order.
            connected_bssid: BSSID of the associated AP, if any.
            stagger: Delay each lookup start by its stagger slot.
            require_ssid: Drop records without an SSID.

        Returns:
            One network per kept record, ordered like the input.
        """
        kept: Sequence[ScannedNetworkRecord] = [
            r for r in records
            if r.bssid and (r.ssid or not require_ssid)
        ]
        if not kept:
            return []

        tasks = [
            asyncio.create_task(
                self._resolve_one(index, record, connected_bssid, stagger)
            )
            for index, record in enumerate(kept)
        ]

        results: list[tuple[int, NearbyWiFiNetwork]] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                results.append(await next_done)
        finally:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        results.sort(key=lambda pair: pair[0])
        logger.debug(
            "Resolved %d networks (stagger=%s)", len(results), stagger,
        )
        return [network for _, network in results]
