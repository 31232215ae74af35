"""
AirScope Core Data Models
==========================

Pydantic-based domain models for AirScope: decoded Information Element
summaries, scan records handed over by the wireless interface, the
vendor-enriched network inventory, and the immutable wireless snapshot.

Hardware enumerations (PHY mode, security mode, channel band and width)
are fixed ``str`` enums with one explicit display label per variant.

References:
    - IEEE. (2020). IEEE Std 802.11-2020: Wireless LAN Medium Access Control
      (MAC) and Physical Layer (PHY) Specifications.
    - FCC 47 CFR 15.407 (U-NII bands, DFS requirements).
    - Pydantic v2 Documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

# Vendor name used when the lookup service definitively has no match.
UNKNOWN_VENDOR = "Unknown Vendor"
# Placeholder for identity fields the interface could not report.
UNKNOWN = "Unknown"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class PHYMode(str, enum.Enum):
    """802.11 physical-layer generation of an interface or network."""

    NONE = "none"
    MODE_11A = "11a"
    MODE_11B = "11b"
    MODE_11G = "11g"
    MODE_11N = "11n"
    MODE_11AC = "11ac"
    MODE_11AX = "11ax"
    MODE_11BE = "11be"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        _map = {
            "none": "None",
            "11a": "802.11a",
            "11b": "802.11b",
            "11g": "802.11g",
            "11n": "802.11n (Wi-Fi 4)",
            "11ac": "802.11ac (Wi-Fi 5)",
            "11ax": "802.11ax (Wi-Fi 6/6E)",
            "11be": "802.11be (Wi-Fi 7)",
            "unknown": "Unknown",
        }
        return _map[self.value]

    @classmethod
    def highest(cls, supported: set[PHYMode]) -> PHYMode:
        """Return the newest generation in *supported*, probing downwards."""
        for mode in (
            cls.MODE_11BE,
            cls.MODE_11AX,
            cls.MODE_11AC,
            cls.MODE_11N,
            cls.MODE_11G,
            cls.MODE_11A,
            cls.MODE_11B,
        ):
            if mode in supported:
                return mode
        return cls.UNKNOWN


class SecurityMode(str, enum.Enum):
    """Link security mode reported by the active interface."""

    OPEN = "open"
    WEP = "wep"
    WPA_PERSONAL = "wpa_personal"
    WPA_PERSONAL_MIXED = "wpa_personal_mixed"
    WPA2_PERSONAL = "wpa2_personal"
    PERSONAL = "personal"
    DYNAMIC_WEP = "dynamic_wep"
    WPA_ENTERPRISE = "wpa_enterprise"
    WPA_ENTERPRISE_MIXED = "wpa_enterprise_mixed"
    WPA2_ENTERPRISE = "wpa2_enterprise"
    ENTERPRISE = "enterprise"
    WPA3_PERSONAL = "wpa3_personal"
    WPA3_ENTERPRISE = "wpa3_enterprise"
    WPA3_TRANSITION = "wpa3_transition"
    OWE = "owe"
    OWE_TRANSITION = "owe_transition"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        _map = {
            "open": "Open",
            "wep": "WEP",
            "wpa_personal": "WPA Personal",
            "wpa_personal_mixed": "WPA/WPA2 Personal",
            "wpa2_personal": "WPA2 Personal",
            "personal": "Personal",
            "dynamic_wep": "Dynamic WEP",
            "wpa_enterprise": "WPA Enterprise",
            "wpa_enterprise_mixed": "WPA/WPA2 Enterprise",
            "wpa2_enterprise": "WPA2 Enterprise",
            "enterprise": "Enterprise",
            "wpa3_personal": "WPA3 Personal",
            "wpa3_enterprise": "WPA3 Enterprise",
            "wpa3_transition": "WPA2/WPA3 Personal",
            "owe": "OWE (Enhanced Open)",
            "owe_transition": "OWE Transition",
            "unknown": "Unknown",
        }
        return _map[self.value]


class ChannelBand(str, enum.Enum):
    """Frequency band of a channel."""

    BAND_2GHZ = "2ghz"
    BAND_5GHZ = "5ghz"
    BAND_6GHZ = "6ghz"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        _map = {
            "2ghz": "2.4 GHz",
            "5ghz": "5 GHz",
            "6ghz": "6 GHz",
            "unknown": "Unknown",
        }
        return _map[self.value]


class ChannelWidth(str, enum.Enum):
    """Operating channel width."""

    WIDTH_20MHZ = "20mhz"
    WIDTH_40MHZ = "40mhz"
    WIDTH_80MHZ = "80mhz"
    WIDTH_160MHZ = "160mhz"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        _map = {
            "20mhz": "20 MHz",
            "40mhz": "40 MHz",
            "80mhz": "80 MHz",
            "160mhz": "160 MHz",
            "unknown": "Unknown",
        }
        return _map[self.value]


class SignalHealth(str, enum.Enum):
    """Five-step link health grade derived from RSSI or SNR.

    Thresholds follow enterprise RF design guidance (HPE Aruba campus
    RF design): RSSI -55/-67/-75/-85 dBm and SNR 35/25/15/10 dB.
    """

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    UNUSABLE = "Unusable"

    @classmethod
    def from_rssi(cls, rssi_dbm: int) -> SignalHealth:
        if rssi_dbm >= -55:
            return cls.EXCELLENT
        if rssi_dbm >= -67:
            return cls.GOOD
        if rssi_dbm >= -75:
            return cls.FAIR
        if rssi_dbm >= -85:
            return cls.POOR
        return cls.UNUSABLE

    @classmethod
    def from_snr(cls, snr_db: int) -> SignalHealth:
        if snr_db >= 35:
            return cls.EXCELLENT
        if snr_db >= 25:
            return cls.GOOD
        if snr_db >= 15:
            return cls.FAIR
        if snr_db >= 10:
            return cls.POOR
        return cls.UNUSABLE


# ---------------------------------------------------------------------------
# Channel
# ---------------------------------------------------------------------------


class ChannelInfo(_FrozenModel):
    """Operating channel of the connected interface.

    Attributes:
        number: Primary channel number.
        band: Frequency band.
        width: Channel width.
    """

    number: int = 0
    band: ChannelBand = ChannelBand.UNKNOWN
    width: ChannelWidth = ChannelWidth.UNKNOWN

    @property
    def unii_band(self) -> str:
        """Regulatory band name (ISM for 2.4 GHz, U-NII-x above)."""
        n = self.number
        if self.band is ChannelBand.BAND_2GHZ:
            return "ISM"
        if self.band is ChannelBand.BAND_5GHZ:
            if 36 <= n <= 48:
                return "UNII-1"
            if 52 <= n <= 64:
                return "UNII-2A"
            if 100 <= n <= 144:
                return "UNII-2C"
            if 149 <= n <= 165:
                return "UNII-3"
            return UNKNOWN
        if self.band is ChannelBand.BAND_6GHZ:
            return "UNII-5" if 1 <= n <= 93 else "6GHz (Other)"
        return UNKNOWN

    @property
    def is_dfs(self) -> bool:
        """Whether the channel falls in a DFS range (FCC 15.407, EN 301 893)."""
        return 52 <= self.number <= 64 or 100 <= self.number <= 144

    @property
    def detailed_description(self) -> str:
        dfs = "DFS" if self.is_dfs else "Non-DFS"
        return (
            f"{self.number} ({self.band.label}, {self.width.label}, "
            f"{self.unii_band}, {dfs})"
        )


# ---------------------------------------------------------------------------
# Decoded Information Elements
# ---------------------------------------------------------------------------


class CipherSuiteInfo(_FrozenModel):
    """Cipher and AKM suites from one RSN or WPA1 element.

    Attributes:
        group: Group data cipher name, if the element carried one.
        pairwise: Pairwise cipher names in element order.
        akms: Authentication and key management suite names.
    """

    group: Optional[str] = None
    pairwise: list[str] = Field(default_factory=list)
    akms: list[str] = Field(default_factory=list)

    def summary(self) -> str:
        """Render as ``"AKM: ...; Pairwise: ...; Group: ..."``."""
        akms = ", ".join(self.akms) if self.akms else "None"
        pairwise = ", ".join(self.pairwise) if self.pairwise else "None"
        group = self.group if self.group is not None else UNKNOWN
        return f"AKM: {akms}; Pairwise: {pairwise}; Group: {group}"


class BSSLoadInfo(_FrozenModel):
    """BSS Load element (IE 11) of an access point.

    Attributes:
        station_count: Associated stations.
        channel_utilization_percent: Busy fraction of the medium, 0-100.
        available_capacity_units: Admission capacity in 32 us/s units.
    """

    station_count: int
    channel_utilization_percent: float
    available_capacity_units: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def available_capacity_percent(self) -> float:
        """Admission capacity as a share of medium time.

        31250 units of 32 us make up one second.
        """
        return self.available_capacity_units / 31250.0 * 100.0


class VendorSpecificIE(_FrozenModel):
    """A vendor-specific element (IE 221) resolved to a vendor name."""

    oui_hex: str
    vendor_name: str


class IEReport(_FrozenModel):
    """Everything the decoder derives from one IE buffer."""

    cipher_info: Optional[CipherSuiteInfo] = None
    bss_load: Optional[BSSLoadInfo] = None
    vendor_specific_ies: list[VendorSpecificIE] = Field(default_factory=list)
    secondary_channel_offset: Optional[str] = None
    secondary_channels: list[int] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def encryption_info(self) -> str:
        if self.cipher_info is None:
            return UNKNOWN
        return self.cipher_info.summary()


# ---------------------------------------------------------------------------
# Scan input / output
# ---------------------------------------------------------------------------


class ScannedNetworkRecord(_FrozenModel):
    """One BSS as reported by a scan of the wireless interface.

    Attributes:
        ssid: Network name, empty for hidden networks.
        bssid: AP radio MAC address, empty if the OS withheld it.
        rssi: Signal strength in dBm.
        noise: Noise floor in dBm, when reported.
        channel_number: Primary channel.
        band: Band label.
        phy_mode: Highest supported PHY label.
        ie_payload: Raw IE octets from the beacon / probe response.
    """

    ssid: str = ""
    bssid: str = ""
    rssi: int = -100
    noise: Optional[int] = None
    channel_number: int = 0
    band: str = UNKNOWN
    phy_mode: str = UNKNOWN
    ie_payload: Optional[bytes] = None


class NearbyWiFiNetwork(_FrozenModel):
    """A scanned network enriched with its resolved vendor."""

    ssid: str
    bssid: str
    vendor: str
    channel: int
    band: str
    phy_mode: str
    rssi: int
    is_connected: bool = False


class InterfaceProperties(_FrozenModel):
    """Live properties of the active wireless interface."""

    interface_name: Optional[str] = None
    ssid: str = UNKNOWN
    bssid: str = UNKNOWN
    rssi: int = 0
    noise: int = 0
    channel: Optional[ChannelInfo] = None
    phy_mode: PHYMode = PHYMode.UNKNOWN
    security: SecurityMode = SecurityMode.UNKNOWN
    country_code: str = UNKNOWN
    tx_rate_mbps: float = 0.0

    @property
    def primary_channel(self) -> int:
        return self.channel.number if self.channel is not None else 0


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class WirelessSnapshot(_FrozenModel):
    """Immutable picture of the wireless environment at one poll.

    Attributes:
        interface_name: BSD / kernel name of the interface.
        ssid: Connected network name.
        bssid: Connected AP radio.
        vendor: Resolved vendor of the connected BSSID.
        channel: Connected channel geometry.
        phy_mode: Active PHY mode.
        security: Active security mode.
        rssi: Signal strength in dBm.
        noise: Noise floor in dBm.
        signal_noise_ratio: ``rssi - noise`` in dB.
        country_code: Regulatory domain.
        tx_rate_mbps: Negotiated transmit rate.
        ie_report: Decoded IEs of the connected BSSID.
        same_ssid_networks: Every BSSID advertising the connected SSID.
        nearby_networks: Every visible named network.
        captured_at: Build time (UTC).
    """

    interface_name: Optional[str] = None
    ssid: str
    bssid: str
    vendor: str
    channel: Optional[ChannelInfo] = None
    phy_mode: PHYMode
    security: SecurityMode
    rssi: int
    noise: int
    signal_noise_ratio: int
    country_code: str
    tx_rate_mbps: float
    ie_report: IEReport = Field(default_factory=IEReport)
    same_ssid_networks: tuple[NearbyWiFiNetwork, ...] = ()
    nearby_networks: tuple[NearbyWiFiNetwork, ...] = ()
    captured_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rssi_health(self) -> SignalHealth:
        return SignalHealth.from_rssi(self.rssi)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def snr_health(self) -> SignalHealth:
        return SignalHealth.from_snr(self.signal_noise_ratio)

    @property
    def encryption_info(self) -> str:
        return self.ie_report.encryption_info
