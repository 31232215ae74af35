"""
Built-in OUI Table
===================

Static Organizationally Unique Identifier table for the vendors that
commonly appear in vendor-specific Information Elements (IE 221) of
beacons and probe responses.  Site-survey tools resolve IE OUIs from a
local table rather than an online service, since the set of vendors
that emit vendor IEs is small and stable.

References:
    - IEEE Registration Authority. MA-L public listing.
      https://standards-oui.ieee.org/oui/oui.txt
"""

from __future__ import annotations

import re

KNOWN_OUIS: dict[str, str] = {
    "00:50:F2": "Microsoft",
    "00:0B:86": "Aruba Networks",
    "00:03:7F": "Atheros Communications",
    "50:6F:9A": "Wi-Fi Alliance",
    "00:40:96": "Cisco Systems",
    "00:10:18": "Broadcom",
    "00:90:4C": "Epigram (Broadcom)",
    "00:17:F2": "Apple",
    "00:E0:4C": "Realtek Semiconductor",
    "8C:FD:F0": "Qualcomm",
    "00:15:6D": "Ubiquiti",
    "00:27:22": "Ubiquiti Networks",
    "00:0C:E7": "MediaTek",
    "00:0C:43": "Ralink Technology",
    "00:24:D7": "Intel Corporate",
    "00:1A:11": "Google",
    "00:26:86": "Quantenna",
    "AC:85:3D": "Huawei Technologies",
    "00:14:6C": "Netgear",
    "00:1B:11": "D-Link",
    "00:0F:AC": "IEEE 802.11",
    "00:13:74": "Atheros",
    "00:1D:6E": "Nokia",
    "00:26:44": "Thomson Telecom",
    "00:A0:40": "Apple",
}

_HEX_ONLY = re.compile(r"[^0-9A-Fa-f]")


def format_oui(raw: bytes) -> str:
    """Render the first three octets of *raw* as ``"XX:XX:XX"``."""
    return ":".join(f"{b:02X}" for b in raw[:3])


def oui_prefix(mac: str) -> str:
    """Return the ``"XX:XX:XX"`` OUI prefix of a MAC address string.

    Accepts colon, dash, dot or unseparated notation.  Returns an empty
    string when fewer than six hex digits are present.
    """
    clean = _HEX_ONLY.sub("", mac or "").upper()
    if len(clean) < 6:
        return ""
    return f"{clean[0:2]}:{clean[2:4]}:{clean[4:6]}"


def lookup_oui(oui_or_mac: str) -> str | None:
    """Resolve an OUI (or any MAC starting with it) from the built-in table."""
    prefix = oui_prefix(oui_or_mac)
    if not prefix:
        return None
    return KNOWN_OUIS.get(prefix)
