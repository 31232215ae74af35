"""Shared fixtures for the AirScope test suite."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from airscope.collectors.vendor_resolver import VendorLookup
from shared.network import ScopeHTTPError

# Raw element encodings used across tests.
SSID_OFFICE = "00064f6666696365"
RSN_WPA2_PSK = "3014" "0100" "000fac04" "0100" "000fac04" "0100" "000fac02" "0c00"
BSS_LOAD = "0b05" "0300" "80" "1027"
HT_OP_ABOVE = "3d16" "24" "05" + "00" * 20
VHT_OP_80 = "c005" "01" "2a" "00" "fcff"
VENDOR_ARUBA = "dd05" "000b86" "0103"
VENDOR_WMM = "dd07" "0050f2" "02010100"

CONNECTED_IES = (
    SSID_OFFICE + RSN_WPA2_PSK + BSS_LOAD + HT_OP_ABOVE + VHT_OP_80
    + VENDOR_ARUBA + VENDOR_WMM
)


class ScriptedLookup(VendorLookup):
    """Lookup returning queued outcomes per identifier.

    Each outcome is a ``(status, body)`` pair or an exception instance.
    When an identifier's queue runs dry the last outcome repeats.
    """

    def __init__(
        self,
        script: dict[str, list[Any]] | None = None,
        default: Any = (404, ""),
        delays: dict[str, float] | None = None,
    ) -> None:
        self._script = {k: list(v) for k, v in (script or {}).items()}
        self._default = default
        self._delays = delays or {}
        self.calls: list[str] = []
        self.closed = False

    async def lookup(self, identifier: str) -> tuple[int, str]:
        self.calls.append(identifier)
        delay = self._delays.get(identifier)
        if delay:
            await asyncio.sleep(delay)
        queue = self._script.get(identifier)
        if queue:
            outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        else:
            outcome = self._default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def transport_error() -> ScopeHTTPError:
    return ScopeHTTPError("connection reset")


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scripted_lookup_cls() -> type[ScriptedLookup]:
    return ScriptedLookup


@pytest.fixture
def connected_ies() -> bytes:
    return bytes.fromhex(CONNECTED_IES)


@pytest.fixture
def ie_hex() -> dict[str, str]:
    return {
        "ssid": SSID_OFFICE,
        "rsn": RSN_WPA2_PSK,
        "bss_load": BSS_LOAD,
        "ht_op": HT_OP_ABOVE,
        "vht_op": VHT_OP_80,
        "vendor_aruba": VENDOR_ARUBA,
        "vendor_wmm": VENDOR_WMM,
    }


@pytest.fixture
def capture_document() -> dict[str, Any]:
    return {
        "interface": {
            "name": "en0",
            "ssid": "Office",
            "bssid": "00:0b:86:aa:bb:01",
            "rssi": -52,
            "noise": -92,
            "channel": {"number": 36, "band": "5ghz", "width": "80mhz"},
            "phy_mode": "11ac",
            "security": "wpa2_personal",
            "country_code": "US",
            "tx_rate_mbps": 866.0,
        },
        "networks": [
            {"ssid": "Office", "bssid": "00:0b:86:aa:bb:01", "rssi": -52,
             "noise": -92, "channel": 36, "band": "5ghz", "phy_mode": "11ac",
             "ie_hex": CONNECTED_IES},
            {"ssid": "Office", "bssid": "00:0b:86:aa:bb:02", "rssi": -70,
             "noise": None, "channel": 149, "band": "5ghz", "phy_mode": "11ac",
             "ie_hex": RSN_WPA2_PSK},
            {"ssid": "", "bssid": "00:17:f2:00:00:09", "rssi": -80,
             "channel": 11, "band": "2ghz", "phy_mode": "11n"},
            {"ssid": "Guest", "bssid": "12:34:56:00:00:01", "rssi": -65,
             "channel": 6, "band": "2ghz", "phy_mode": "11n"},
            {"ssid": "Cafe", "bssid": "", "rssi": -88,
             "channel": 1, "band": "2ghz", "phy_mode": "11g"},
        ],
    }


@pytest.fixture
def capture_file(tmp_path: Path, capture_document: dict[str, Any]) -> Path:
    path = tmp_path / "capture.json"
    path.write_text(json.dumps(capture_document), encoding="utf-8")
    return path
