"""
Wireless Interface Adapters
============================

The wireless interface is the system collaborator that reports the
active interface's properties and runs network scans.  AirScope talks
to it only through :class:`WirelessInterface`.

:class:`CaptureFileInterface` replays a JSON capture document, which
lets the whole snapshot pipeline run without radio access::

    {
      "interface": {"name": "en0", "ssid": "Office", "bssid": "...",
                    "rssi": -52, "noise": -92,
                    "channel": {"number": 36, "band": "5ghz", "width": "80mhz"},
                    "phy_mode": "11ac", "security": "wpa2_personal",
                    "country_code": "US", "tx_rate_mbps": 866.0},
      "networks": [{"ssid": "Office", "bssid": "...", "rssi": -60,
                    "noise": null, "channel": 36, "band": "5ghz",
                    "phy_mode": "11ac", "ie_hex": "3014..."}]
    }

A capture without an ``"interface"`` object has no active interface.
A scan entry may list ``"phy_modes"`` instead of ``"phy_mode"``; it is
reported as the newest generation in the list.
"""

from __future__ import annotations

import abc
import asyncio
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from shared.logger import ScopeLogger

from airscope.core.models import (
    UNKNOWN,
    ChannelBand,
    ChannelInfo,
    ChannelWidth,
    InterfaceProperties,
    PHYMode,
    ScannedNetworkRecord,
    SecurityMode,
)

logger = ScopeLogger("airscope.collectors.interface")


class CaptureFormatError(ValueError):
    """The capture document is unreadable or structurally invalid."""


class WirelessInterface(abc.ABC):
    """Source of active-interface properties and scan results."""

    @abc.abstractmethod
    async def current_interface(
        self, name: Optional[str] = None
    ) -> Optional[InterfaceProperties]:
        """Properties of interface *name* (or the default one).

        Returns ``None`` when no wireless interface is active.
        """

    @abc.abstractmethod
    async def scan(self, ssid: Optional[str] = None) -> list[ScannedNetworkRecord]:
        """Scan for networks, restricted to *ssid* when given."""


# ---------------------------------------------------------------------------
# Capture-file adapter
# ---------------------------------------------------------------------------


def _enum_or_default(enum_cls: Any, value: Any, default: Any) -> Any:
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _label(enum_cls: Any, value: Any) -> str:
    """Render a capture enum value through its label, passing free text through."""
    if value is None or value == "":
        return UNKNOWN
    try:
        return enum_cls(value).label
    except ValueError:
        return str(value)


def _phy_label(position: int, raw: dict[str, Any]) -> str:
    """PHY label of a scan entry, from "phy_mode" or the newest of "phy_modes"."""
    if raw.get("phy_mode") is not None or "phy_modes" not in raw:
        return _label(PHYMode, raw.get("phy_mode"))
    modes = raw["phy_modes"]
    if not isinstance(modes, list):
        raise CaptureFormatError(f"networks[{position}].phy_modes must be a list")
    supported = {
        mode
        for mode in (_enum_or_default(PHYMode, m, None) for m in modes)
        if mode is not None
    }
    return PHYMode.highest(supported).label


class CaptureFileInterface(WirelessInterface):
    """Replays interface state and scan results from a JSON file.

    The file is read once, lazily, in a worker thread.

    Args:
        path: Location of the capture document.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._document: Optional[dict[str, Any]] = None
        self._load_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CaptureFormatError(f"Cannot read capture {self._path}: {exc}") from exc
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CaptureFormatError(f"Capture {self._path} is not valid JSON: {exc}") from exc
        if not isinstance(document, dict):
            raise CaptureFormatError(f"Capture {self._path} must hold a JSON object")
        networks = document.get("networks", [])
        if not isinstance(networks, list):
            raise CaptureFormatError("'networks' must be a list")
        return document

    async def _load(self) -> dict[str, Any]:
        async with self._load_lock:
            if self._document is None:
                self._document = await asyncio.to_thread(self._read)
                logger.debug(
                    "Loaded capture %s (%d networks)",
                    self._path, len(self._document.get("networks", [])),
                )
            return self._document

    async def current_interface(
        self, name: Optional[str] = None
    ) -> Optional[InterfaceProperties]:
        document = await self._load()
        raw = document.get("interface")
        if not raw:
            return None
        if not isinstance(raw, dict):
            raise CaptureFormatError("'interface' must be an object")

        interface_name = raw.get("name")
        if name is not None and interface_name is not None and name != interface_name:
            logger.info("Interface %s not present in capture", name)
            return None

        try:
            return InterfaceProperties(
                interface_name=interface_name,
                ssid=raw.get("ssid") or UNKNOWN,
                bssid=raw.get("bssid") or UNKNOWN,
                rssi=raw.get("rssi", 0),
                noise=raw.get("noise", 0),
                channel=self._channel(raw.get("channel")),
                phy_mode=_enum_or_default(PHYMode, raw.get("phy_mode"), PHYMode.UNKNOWN),
                security=_enum_or_default(
                    SecurityMode, raw.get("security"), SecurityMode.UNKNOWN
                ),
                country_code=raw.get("country_code") or UNKNOWN,
                tx_rate_mbps=raw.get("tx_rate_mbps", 0.0),
            )
        except ValidationError as exc:
            raise CaptureFormatError(f"Invalid interface entry: {exc}") from exc

    @staticmethod
    def _channel(raw: Any) -> Optional[ChannelInfo]:
        if raw is None:
            return None
        if isinstance(raw, int):
            return ChannelInfo(number=raw)
        if not isinstance(raw, dict):
            raise CaptureFormatError("'interface.channel' must be an object or number")
        return ChannelInfo(
            number=raw.get("number", 0),
            band=_enum_or_default(ChannelBand, raw.get("band"), ChannelBand.UNKNOWN),
            width=_enum_or_default(ChannelWidth, raw.get("width"), ChannelWidth.UNKNOWN),
        )

    async def scan(self, ssid: Optional[str] = None) -> list[ScannedNetworkRecord]:
        document = await self._load()
        records: list[ScannedNetworkRecord] = []
        for position, raw in enumerate(document.get("networks", [])):
            if not isinstance(raw, dict):
                raise CaptureFormatError(f"networks[{position}] must be an object")
            if ssid is not None and raw.get("ssid") != ssid:
                continue
            records.append(self._record(position, raw))
        return records

    @staticmethod
    def _record(position: int, raw: dict[str, Any]) -> ScannedNetworkRecord:
        ie_hex = raw.get("ie_hex")
        payload: Optional[bytes] = None
        if ie_hex:
            try:
                payload = bytes.fromhex(ie_hex)
            except (TypeError, ValueError) as exc:
                raise CaptureFormatError(
                    f"networks[{position}].ie_hex is not valid hex"
                ) from exc
        try:
            return ScannedNetworkRecord(
                ssid=raw.get("ssid") or "",
                bssid=raw.get("bssid") or "",
                rssi=raw.get("rssi", -100),
                noise=raw.get("noise"),
                channel_number=raw.get("channel", 0),
                band=_label(ChannelBand, raw.get("band")),
                phy_mode=_phy_label(position, raw),
                ie_payload=payload,
            )
        except ValidationError as exc:
            raise CaptureFormatError(f"Invalid networks[{position}]: {exc}") from exc
