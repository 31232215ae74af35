"""
AirScope Engine
================

Composes the decoder, the vendor resolver and the scan aggregator into
one immutable :class:`WirelessSnapshot` per poll.

Snapshot pipeline:
    1. Interface: read the active interface's properties (none -> no snapshot)
    2. Scan: SSID-filtered scan, then an unfiltered scan
    3. Decode: IE report of the connected BSSID's record
    4. Enrich: connected vendor, same-SSID list and nearby list,
       concurrently, joined before assembly
    5. Assemble: SNR, health grades, immutable snapshot

References:
    - IEEE. (2020). IEEE Std 802.11-2020, Clause 9.4.2.
    - Python asyncio: Coroutines and Tasks.
      https://docs.python.org/3/library/asyncio-task.html
"""

from __future__ import annotations

import asyncio
from typing import Optional

from shared.config import AirScopeConfig
from shared.logger import ScopeLogger

from airscope.collectors.interface import WirelessInterface
from airscope.collectors.scan_aggregator import ScanAggregator
from airscope.collectors.vendor_cache import VendorCache
from airscope.collectors.vendor_resolver import (
    MacVendorsLookup,
    OfflineVendorLookup,
    VendorLookup,
    VendorResolver,
)
from airscope.core.models import (
    UNKNOWN,
    IEReport,
    InterfaceProperties,
    ScannedNetworkRecord,
    WirelessSnapshot,
)
from airscope.parsers.ie_parser import decode_report

logger = ScopeLogger("airscope.core.engine")


class SnapshotBuilder:
    """Builds wireless snapshots from one interface.

    Usage::

        builder = SnapshotBuilder(interface, aggregator, resolver)
        snapshot = await builder.build_snapshot()

    Args:
        interface: Source of interface properties and scans.
        aggregator: Vendor enrichment for scan lists.
        resolver: Vendor resolution for the connected BSSID.
        require_ssid: Drop hidden networks from both lists.
    """

    def __init__(
        self,
        interface: WirelessInterface,
        aggregator: ScanAggregator,
        resolver: VendorResolver,
        *,
        require_ssid: bool = True,
    ) -> None:
        self._interface = interface
        self._aggregator = aggregator
        self._resolver = resolver
        self._require_ssid = require_ssid

    @staticmethod
    def connected_report(
        props: InterfaceProperties,
        same_ssid_records: list[ScannedNetworkRecord],
    ) -> IEReport:
        """Decode the IE buffer of the record matching the connected BSSID."""
        for record in same_ssid_records:
            if record.bssid == props.bssid:
                if record.ie_payload:
                    return decode_report(record.ie_payload, props.primary_channel)
                break
        return IEReport()

    async def build_snapshot(
        self, interface_name: Optional[str] = None
    ) -> Optional[WirelessSnapshot]:
        """Take one snapshot of the wireless environment.

        Returns:
            The snapshot, or ``None`` when no wireless interface is
            active.
        """
        with logger.operation("snapshot"), logger.timed("snapshot build"):
            props = await self._interface.current_interface(interface_name)
            if props is None:
                logger.warning("No active wireless interface")
                return None

            same_ssid_records = await self._interface.scan(props.ssid)
            all_records = await self._interface.scan()
            logger.debug(
                "Scanned %d same-SSID and %d total records",
                len(same_ssid_records), len(all_records),
            )

            report = self.connected_report(props, same_ssid_records)

            connected_bssid = props.bssid if props.bssid != UNKNOWN else None
            connected_key = (
                self._aggregator.lookup_key(connected_bssid) if connected_bssid else ""
            )

            vendor, same_ssid, nearby = await asyncio.gather(
                self._resolver.resolve(connected_key),
                self._aggregator.build_network_list(
                    same_ssid_records,
                    connected_bssid,
                    stagger=False,
                    require_ssid=self._require_ssid,
                ),
                self._aggregator.build_network_list(
                    all_records,
                    connected_bssid,
                    stagger=True,
                    require_ssid=self._require_ssid,
                ),
            )

            return WirelessSnapshot(
                interface_name=props.interface_name,
                ssid=props.ssid,
                bssid=props.bssid,
                vendor=vendor,
                channel=props.channel,
                phy_mode=props.phy_mode,
                security=props.security,
                rssi=props.rssi,
                noise=props.noise,
                signal_noise_ratio=props.rssi - props.noise,
                country_code=props.country_code,
                tx_rate_mbps=props.tx_rate_mbps,
                ie_report=report,
                same_ssid_networks=tuple(same_ssid),
                nearby_networks=tuple(nearby),
            )


class AirScopeEngine:
    """Wires configuration into a :class:`SnapshotBuilder`.

    Owns the vendor cache for its lifetime, so repeated snapshots from
    the same engine share resolved names.

    Args:
        config: AirScope configuration. Defaults if None.
        offline: Resolve vendors from the built-in OUI table only.
        lookup: Explicit lookup collaborator; overrides *offline*.
    """

    def __init__(
        self,
        config: Optional[AirScopeConfig] = None,
        *,
        offline: bool = False,
        lookup: Optional[VendorLookup] = None,
    ) -> None:
        self._config = config or AirScopeConfig()
        if lookup is None:
            lookup = (
                OfflineVendorLookup()
                if offline
                else MacVendorsLookup.from_config(self._config.lookup)
            )
        self._lookup = lookup
        self._cache = VendorCache(negative_ttl=self._config.lookup.negative_ttl)
        self._resolver = VendorResolver.from_config(
            self._lookup, self._cache, self._config.lookup
        )
        self._aggregator = ScanAggregator.from_config(self._resolver, self._config.scan)

    @property
    def cache(self) -> VendorCache:
        return self._cache

    def builder(self, interface: WirelessInterface) -> SnapshotBuilder:
        return SnapshotBuilder(
            interface,
            self._aggregator,
            self._resolver,
            require_ssid=self._config.scan.require_ssid,
        )

    async def snapshot(
        self,
        interface: WirelessInterface,
        interface_name: Optional[str] = None,
    ) -> Optional[WirelessSnapshot]:
        return await self.builder(interface).build_snapshot(interface_name)

    async def close(self) -> None:
        await self._lookup.close()

    async def __aenter__(self) -> AirScopeEngine:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
