"""Tests for AirScope domain models and enumerations."""

from __future__ import annotations

import pydantic
import pytest

from airscope.core.models import (
    BSSLoadInfo,
    ChannelBand,
    ChannelInfo,
    ChannelWidth,
    CipherSuiteInfo,
    IEReport,
    PHYMode,
    SecurityMode,
    SignalHealth,
    WirelessSnapshot,
)


class TestEnumLabels:
    def test_phy_mode(self):
        assert PHYMode.MODE_11AX.label == "802.11ax (Wi-Fi 6/6E)"
        assert PHYMode.MODE_11BE.label == "802.11be (Wi-Fi 7)"
        assert PHYMode.NONE.label == "None"
        assert PHYMode.UNKNOWN.label == "Unknown"

    def test_every_variant_has_label(self):
        for enum_cls in (PHYMode, SecurityMode, ChannelBand, ChannelWidth):
            for member in enum_cls:
                assert member.label

    def test_security_mode(self):
        assert SecurityMode.WPA3_TRANSITION.label == "WPA2/WPA3 Personal"
        assert SecurityMode.OWE.label == "OWE (Enhanced Open)"
        assert SecurityMode.WPA_ENTERPRISE_MIXED.label == "WPA/WPA2 Enterprise"

    def test_band_and_width(self):
        assert ChannelBand.BAND_2GHZ.label == "2.4 GHz"
        assert ChannelWidth.WIDTH_160MHZ.label == "160 MHz"

    def test_highest_phy(self):
        supported = {PHYMode.MODE_11A, PHYMode.MODE_11N, PHYMode.MODE_11AC}
        assert PHYMode.highest(supported) is PHYMode.MODE_11AC
        assert PHYMode.highest(set()) is PHYMode.UNKNOWN


class TestSignalHealth:
    @pytest.mark.parametrize(
        "rssi, grade",
        [(-40, "Excellent"), (-55, "Excellent"), (-56, "Good"), (-67, "Good"),
         (-70, "Fair"), (-85, "Poor"), (-86, "Unusable")],
    )
    def test_from_rssi(self, rssi, grade):
        assert SignalHealth.from_rssi(rssi).value == grade

    @pytest.mark.parametrize(
        "snr, grade",
        [(40, "Excellent"), (35, "Excellent"), (30, "Good"), (15, "Fair"),
         (10, "Poor"), (9, "Unusable")],
    )
    def test_from_snr(self, snr, grade):
        assert SignalHealth.from_snr(snr).value == grade


class TestChannelInfo:
    @pytest.mark.parametrize(
        "number, band, unii, dfs",
        [
            (6, ChannelBand.BAND_2GHZ, "ISM", False),
            (36, ChannelBand.BAND_5GHZ, "UNII-1", False),
            (52, ChannelBand.BAND_5GHZ, "UNII-2A", True),
            (100, ChannelBand.BAND_5GHZ, "UNII-2C", True),
            (149, ChannelBand.BAND_5GHZ, "UNII-3", False),
            (169, ChannelBand.BAND_5GHZ, "Unknown", False),
            (37, ChannelBand.BAND_6GHZ, "UNII-5", False),
            (133, ChannelBand.BAND_6GHZ, "6GHz (Other)", True),
        ],
    )
    def test_unii_and_dfs(self, number, band, unii, dfs):
        channel = ChannelInfo(number=number, band=band)
        assert channel.unii_band == unii
        assert channel.is_dfs is dfs

    def test_detailed_description(self):
        channel = ChannelInfo(
            number=36, band=ChannelBand.BAND_5GHZ, width=ChannelWidth.WIDTH_80MHZ
        )
        assert channel.detailed_description == "36 (5 GHz, 80 MHz, UNII-1, Non-DFS)"


class TestCipherSuiteInfo:
    def test_summary_empty_lists(self):
        info = CipherSuiteInfo(group="TKIP")
        assert info.summary() == "AKM: None; Pairwise: None; Group: TKIP"

    def test_summary_missing_group(self):
        info = CipherSuiteInfo(pairwise=["TKIP", "CCMP-128 (AES)"], akms=["OWE"])
        assert info.summary() == (
            "AKM: OWE; Pairwise: TKIP, CCMP-128 (AES); Group: Unknown"
        )


def test_bss_load_serialises_capacity_percent():
    load = BSSLoadInfo(
        station_count=1, channel_utilization_percent=0.0, available_capacity_units=31250
    )
    assert load.model_dump()["available_capacity_percent"] == pytest.approx(100.0)


def test_report_is_frozen():
    report = IEReport()
    with pytest.raises(pydantic.ValidationError):
        report.secondary_channel_offset = "Above"


def test_snapshot_health_and_json():
    snapshot = WirelessSnapshot(
        ssid="Office",
        bssid="00:0b:86:aa:bb:01",
        vendor="Aruba Networks",
        phy_mode=PHYMode.MODE_11AC,
        security=SecurityMode.WPA2_PERSONAL,
        rssi=-70,
        noise=-90,
        signal_noise_ratio=20,
        country_code="US",
        tx_rate_mbps=400.0,
    )
    assert snapshot.rssi_health is SignalHealth.FAIR
    assert snapshot.snr_health is SignalHealth.FAIR
    assert snapshot.encryption_info == "Unknown"

    dumped = snapshot.model_dump(mode="json")
    assert dumped["rssi_health"] == "Fair"
    assert dumped["phy_mode"] == "11ac"
    assert dumped["ie_report"]["encryption_info"] == "Unknown"
    assert dumped["nearby_networks"] == []
