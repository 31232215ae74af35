"""
AirScope Console Output
========================

Rich-based rendering of wireless snapshots and single IE-buffer decode
reports.

References:
    - Rich library: https://github.com/Textualize/rich
    - AirScope Console: shared.console.ScopeConsole
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.markup import escape

from shared.console import ScopeConsole

from airscope.core.models import (
    UNKNOWN,
    IEReport,
    NearbyWiFiNetwork,
    SignalHealth,
    WirelessSnapshot,
)
from airscope.parsers.ie_parser import InformationElement


# ---------------------------------------------------------------------------
# Colour mappings
# ---------------------------------------------------------------------------

_HEALTH_COLORS: dict[SignalHealth, str] = {
    SignalHealth.EXCELLENT: "bold bright_green",
    SignalHealth.GOOD: "bold green",
    SignalHealth.FAIR: "bold yellow",
    SignalHealth.POOR: "bold bright_red",
    SignalHealth.UNUSABLE: "bold red",
}


def _health(value: int, unit: str, grade: SignalHealth) -> str:
    color = _HEALTH_COLORS[grade]
    return f"{value} {unit} [{color}]({grade.value})[/{color}]"


def _vendor(name: str) -> str:
    return escape(name) if name else "[dim]Lookup failed[/dim]"


# ---------------------------------------------------------------------------
# Console Output
# ---------------------------------------------------------------------------


class AirScopeConsoleOutput:
    """Formatted display of AirScope results.

    Usage::

        output = AirScopeConsoleOutput(ScopeConsole())
        output.display_snapshot(snapshot)
        output.display_decode(elements, report)
    """

    def __init__(self, console: Optional[ScopeConsole] = None) -> None:
        self._console = console or ScopeConsole()

    def display_snapshot(self, snapshot: WirelessSnapshot) -> None:
        """Connected network, its IE report, and both network lists."""
        channel = (
            snapshot.channel.detailed_description if snapshot.channel else UNKNOWN
        )
        self._console.section("Connected Network")
        self._console.key_values(
            escape(snapshot.interface_name or "Wi-Fi"),
            [
                ("SSID", escape(snapshot.ssid)),
                ("BSSID", escape(snapshot.bssid)),
                ("Vendor", _vendor(snapshot.vendor)),
                ("Channel", channel),
                ("PHY Mode", snapshot.phy_mode.label),
                ("Security", snapshot.security.label),
                ("Encryption", snapshot.encryption_info),
                ("RSSI", _health(snapshot.rssi, "dBm", snapshot.rssi_health)),
                ("Noise", f"{snapshot.noise} dBm"),
                ("SNR", _health(snapshot.signal_noise_ratio, "dB", snapshot.snr_health)),
                ("Country", escape(snapshot.country_code)),
                ("Tx Rate", f"{snapshot.tx_rate_mbps:g} Mbps"),
            ],
        )
        self.display_report(snapshot.ie_report)

        self._console.section("Access Points")
        self._network_table(
            f"Same SSID ({escape(snapshot.ssid)})", snapshot.same_ssid_networks
        )
        self._network_table("Nearby Networks", snapshot.nearby_networks)

    def display_report(self, report: IEReport) -> None:
        pairs: list[tuple[str, object]] = []
        if report.bss_load is not None:
            load = report.bss_load
            pairs += [
                ("Stations", load.station_count),
                ("Channel Utilization", f"{load.channel_utilization_percent:.1f}%"),
                ("Available Capacity", f"{load.available_capacity_percent:.1f}%"),
            ]
        if report.secondary_channel_offset is not None:
            pairs.append(("Secondary Offset", report.secondary_channel_offset))
        if report.secondary_channels:
            pairs.append(
                ("Secondary Channels", ", ".join(str(c) for c in report.secondary_channels))
            )
        if pairs:
            self._console.key_values("Information Elements", pairs)

        if report.cipher_info is not None:
            info = report.cipher_info
            self._console.table(
                "Cipher Suites",
                ["Role", "Suites"],
                [
                    ("Group", info.group or UNKNOWN),
                    ("Pairwise", ", ".join(info.pairwise) or "None"),
                    ("AKM", ", ".join(info.akms) or "None"),
                ],
                styles=["scope.dim", "scope.highlight"],
            )

        if report.vendor_specific_ies:
            self._console.table(
                "Vendor Specific IEs",
                ["OUI", "Vendor"],
                [(ie.oui_hex, escape(ie.vendor_name)) for ie in report.vendor_specific_ies],
                styles=["cyan", ""],
            )

    def display_decode(
        self, elements: Sequence[InformationElement], report: IEReport
    ) -> None:
        """Element listing followed by the decoded report."""
        self._console.section("Information Elements")
        self._console.table(
            "Elements",
            ["#", "ID", "Name", "Len", "Payload"],
            [
                (i, e.id, e.name, len(e.payload), e.payload.hex())
                for i, e in enumerate(elements)
            ],
            styles=["dim", "cyan", "bold", "", "dim"],
        )
        if report.cipher_info is None:
            self._console.info("No RSN or WPA element present")
        self.display_report(report)

    def _network_table(
        self, title: str, networks: Sequence[NearbyWiFiNetwork]
    ) -> None:
        if not networks:
            self._console.info(f"{title}: none")
            return
        rows = [
            (
                ("* " if n.is_connected else "") + escape(n.ssid),
                escape(n.bssid),
                _vendor(n.vendor),
                n.channel,
                escape(n.band),
                escape(n.phy_mode),
                n.rssi,
            )
            for n in networks
        ]
        self._console.table(
            title,
            ["SSID", "BSSID", "Vendor", "Ch", "Band", "PHY", "RSSI"],
            rows,
            caption="* connected",
        )
