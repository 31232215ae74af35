"""
802.11 Information Element Parser
==================================

Pure, stateless decoding of the Information Element (IE) chain carried
in beacon and probe-response frames.

Every element is a TLV triple::

    +---------+----------+----------------------+
    | ID (1)  | Len (1)  | Payload (Len octets) |
    +---------+----------+----------------------+

Captured buffers are frequently truncated by noisy RF capture, so the
walk stops at the first element that would overrun the buffer and
returns what it has.  None of the functions in this module raise on
malformed input; missing or short elements yield ``None`` or ``[]``.

Elements decoded here:
    - 11  BSS Load                 (IEEE 802.11-2020, 9.4.2.27)
    - 48  RSN                      (9.4.2.24)
    - 61  HT Operation             (9.4.2.56)
    - 192 VHT Operation            (9.4.2.158)
    - 221 Vendor Specific, incl. WPA1 (9.4.2.25)

References:
    - IEEE. (2020). IEEE Std 802.11-2020. Clause 9.4.2: Elements.
    - Wi-Fi Alliance. (2004). Wi-Fi Protected Access (WPA) v3.1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from airscope.core.models import (
    BSSLoadInfo,
    CipherSuiteInfo,
    IEReport,
    VendorSpecificIE,
)
from airscope.parsers.oui import KNOWN_OUIS, format_oui


# ===================================================================== #
#  Element IDs and suite selectors
# ===================================================================== #

IE_SSID = 0
IE_BSS_LOAD = 11
IE_RSN = 48
IE_HT_OPERATION = 61
IE_VHT_OPERATION = 192
IE_VENDOR_SPECIFIC = 221

ELEMENT_NAMES: dict[int, str] = {
    0: "SSID",
    1: "Supported Rates",
    3: "DS Parameter Set",
    5: "TIM",
    7: "Country",
    11: "BSS Load",
    32: "Power Constraint",
    35: "TPC Report",
    42: "ERP Information",
    45: "HT Capabilities",
    48: "RSN",
    50: "Extended Supported Rates",
    54: "Mobility Domain",
    61: "HT Operation",
    70: "RM Enabled Capabilities",
    127: "Extended Capabilities",
    191: "VHT Capabilities",
    192: "VHT Operation",
    195: "VHT Transmit Power Envelope",
    221: "Vendor Specific",
    255: "Element ID Extension",
}

IEEE_OUI = b"\x00\x0f\xac"
MS_OUI = b"\x00\x50\xf2"
WPA1_PREFIX = MS_OUI + b"\x01"

# RSN payload: version(2) precedes the group suite.
_RSN_BASE_OFFSET = 2
# WPA1 payload: OUI(3) + type(1) + version(2) precede the group suite.
_WPA1_BASE_OFFSET = 6

_SUITE_LEN = 4

# IEEE 802.11-2020 Table 9-149
_IEEE_CIPHERS: dict[int, str] = {
    1: "WEP-40",
    2: "TKIP",
    4: "CCMP-128 (AES)",
    5: "WEP-104",
    6: "BIP-CMAC-128",
    8: "GCMP-128",
    9: "GCMP-256",
    10: "CCMP-256",
    11: "BIP-GMAC-128",
    12: "BIP-GMAC-256",
    13: "BIP-CMAC-256",
}

# IEEE 802.11-2020 Table 9-151
_IEEE_AKMS: dict[int, str] = {
    1: "802.1X (EAP)",
    2: "PSK (WPA2)",
    3: "FT-802.1X",
    4: "FT-PSK",
    5: "802.1X-SHA256",
    6: "PSK-SHA256",
    8: "SAE (WPA3)",
    9: "FT-SAE",
    11: "802.1X-Suite-B",
    12: "802.1X-Suite-B-192",
    18: "OWE",
    24: "SAE-EXT-KEY",
}

_WPA1_CIPHERS: dict[int, str] = {
    2: "TKIP (WPA)",
    4: "CCMP (WPA)",
}

_WPA1_AKMS: dict[int, str] = {
    1: "802.1X (WPA)",
    2: "PSK (WPA)",
}

_SECONDARY_OFFSET_NAMES: dict[int, str] = {
    0: "None",
    1: "Above",
    3: "Below",
}

# VHT channel-width field -> 20 MHz sub-channel offsets around a centre.
_VHT_80MHZ_OFFSETS = (-6, -2, 2, 6)
_VHT_160MHZ_OFFSETS = (-14, -10, -6, -2, 2, 6, 10, 14)


# ===================================================================== #
#  Data Structures
# ===================================================================== #


@dataclass(frozen=True, slots=True)
class InformationElement:
    """One decoded TLV element.

    Attributes:
        id: Element ID (0-255).
        payload: Element body, without the two header octets.
    """

    id: int
    payload: bytes

    @property
    def name(self) -> str:
        return element_name(self.id)


Elements = Sequence[InformationElement]


def element_name(element_id: int) -> str:
    """Human-readable name for common element IDs."""
    return ELEMENT_NAMES.get(element_id, f"Element {element_id}")


# ===================================================================== #
#  TLV walk
# ===================================================================== #


def parse_elements(buffer: bytes | bytearray | memoryview | None) -> list[InformationElement]:
    """Split a raw IE buffer into its elements, in order.

    Stops without error once fewer than two header octets remain or a
    declared length runs past the end of the buffer; the elements
    parsed up to that point are returned.

    Args:
        buffer: Raw IE octets from a beacon or probe response.

    Returns:
        Parsed elements; empty for an empty or ``None`` buffer.
    """
    if not buffer:
        return []

    data = bytes(buffer)
    elements: list[InformationElement] = []
    offset = 0
    while offset + 2 <= len(data):
        element_id = data[offset]
        length = data[offset + 1]
        start = offset + 2
        end = start + length
        if end > len(data):
            break
        elements.append(InformationElement(element_id, data[start:end]))
        offset = end
    return elements


def _first(elements: Iterable[InformationElement], element_id: int) -> Optional[InformationElement]:
    for element in elements:
        if element.id == element_id:
            return element
    return None


def _le_u16(data: bytes, offset: int) -> int:
    return data[offset] | (data[offset + 1] << 8)


# ===================================================================== #
#  Security suites (RSN / WPA1)
# ===================================================================== #


def _suite_fallback(oui: bytes, suite_type: int) -> str:
    return f"{format_oui(oui)}:{suite_type:02X}"


def cipher_name(oui: bytes, suite_type: int) -> str:
    """Resolve a cipher suite selector to its display name."""
    if oui == IEEE_OUI:
        return _IEEE_CIPHERS.get(suite_type, f"RSN-Cipher-{suite_type}")
    if oui == MS_OUI:
        return _WPA1_CIPHERS.get(suite_type, f"WPA-Cipher-{suite_type}")
    return _suite_fallback(oui, suite_type)


def akm_name(oui: bytes, suite_type: int) -> str:
    """Resolve an AKM suite selector to its display name."""
    if oui == IEEE_OUI:
        return _IEEE_AKMS.get(suite_type, f"AKM-{suite_type}")
    if oui == MS_OUI:
        return _WPA1_AKMS.get(suite_type, f"WPA-AKM-{suite_type}")
    return _suite_fallback(oui, suite_type)


def _parse_suite_list(
    payload: bytes,
    offset: int,
    resolver: Callable[[bytes, int], str],
) -> tuple[list[str], int]:
    """Read a LE u16 count followed by that many 4-octet suites.

    Returns the resolved names and the offset after the last suite
    actually read.  A missing count yields ``[]``; a short list is cut
    where the payload ends.
    """
    if offset + 2 > len(payload):
        return [], offset

    count = _le_u16(payload, offset)
    offset += 2
    names: list[str] = []
    for _ in range(count):
        if offset + _SUITE_LEN > len(payload):
            break
        names.append(resolver(payload[offset:offset + 3], payload[offset + 3]))
        offset += _SUITE_LEN
    return names, offset


def _parse_security_structure(payload: bytes, base_offset: int) -> Optional[CipherSuiteInfo]:
    if len(payload) < base_offset + _SUITE_LEN:
        return None

    group = cipher_name(
        payload[base_offset:base_offset + 3], payload[base_offset + 3]
    )
    offset = base_offset + _SUITE_LEN
    pairwise, offset = _parse_suite_list(payload, offset, cipher_name)
    akms, offset = _parse_suite_list(payload, offset, akm_name)
    return CipherSuiteInfo(group=group, pairwise=pairwise, akms=akms)


def extract_cipher_info(elements: Elements) -> Optional[CipherSuiteInfo]:
    """Decode group / pairwise / AKM suites of the network.

    The RSN element (WPA2/WPA3) takes priority; otherwise the first
    WPA1 vendor element (``00:50:F2`` type 1) is used.

    Returns:
        The suites, or ``None`` when no security element is present
        or it is too short to carry a group cipher.
    """
    rsn = _first(elements, IE_RSN)
    if rsn is not None:
        return _parse_security_structure(rsn.payload, _RSN_BASE_OFFSET)

    for element in elements:
        if element.id == IE_VENDOR_SPECIFIC and element.payload.startswith(WPA1_PREFIX):
            return _parse_security_structure(element.payload, _WPA1_BASE_OFFSET)

    return None


# ===================================================================== #
#  BSS Load
# ===================================================================== #


def extract_bss_load(elements: Elements) -> Optional[BSSLoadInfo]:
    """Decode the BSS Load element (IE 11).

    Payload layout: station count (LE u16), channel utilization
    (u8, scaled to 255), available admission capacity (LE u16, units
    of 32 us per second).
    """
    element = _first(elements, IE_BSS_LOAD)
    if element is None or len(element.payload) < 5:
        return None

    payload = element.payload
    return BSSLoadInfo(
        station_count=_le_u16(payload, 0),
        channel_utilization_percent=payload[2] / 255.0 * 100.0,
        available_capacity_units=_le_u16(payload, 3),
    )


# ===================================================================== #
#  Channel geometry (HT / VHT Operation)
# ===================================================================== #


def _ht_secondary_offset(elements: Elements) -> Optional[int]:
    element = _first(elements, IE_HT_OPERATION)
    if element is None or len(element.payload) < 2:
        return None
    # Byte 0 is the primary channel; bits 0-1 of byte 1 the offset.
    return element.payload[1] & 0x03


def extract_secondary_channel_offset(elements: Elements) -> Optional[str]:
    """Return ``"None"``, ``"Above"``, ``"Below"`` or ``"Reserved"``."""
    offset = _ht_secondary_offset(elements)
    if offset is None:
        return None
    return _SECONDARY_OFFSET_NAMES.get(offset, "Reserved")


def extract_secondary_channels(primary_channel: int, elements: Elements) -> list[int]:
    """List the 20 MHz channels bonded to *primary_channel*.

    VHT Operation (80, 160 and 80+80 MHz) is consulted first; when it is
    absent, short, or reports a 20/40 MHz width, the HT Operation
    secondary offset decides a single +/-4 neighbour.

    Returns:
        Ascending channel numbers excluding the primary; ``[]`` for a
        20 MHz network or a non-positive primary channel.
    """
    if primary_channel <= 0:
        return []

    vht = _first(elements, IE_VHT_OPERATION)
    if vht is not None and len(vht.payload) >= 3:
        width, center1, center2 = vht.payload[0], vht.payload[1], vht.payload[2]
        channels: Optional[list[int]] = None
        if width == 1:
            channels = [center1 + d for d in _VHT_80MHZ_OFFSETS]
        elif width == 2:
            channels = [center1 + d for d in _VHT_160MHZ_OFFSETS]
        elif width == 3:
            channels = [center1 + d for d in _VHT_80MHZ_OFFSETS]
            channels += [center2 + d for d in _VHT_80MHZ_OFFSETS]
        if channels is not None:
            return sorted(ch for ch in channels if ch != primary_channel)

    offset = _ht_secondary_offset(elements)
    if offset == 1:
        return [primary_channel + 4]
    if offset == 3:
        return [primary_channel - 4]
    return []


# ===================================================================== #
#  Vendor-specific elements
# ===================================================================== #


def extract_vendor_specific_ies(elements: Elements) -> list[VendorSpecificIE]:
    """Resolve the distinct OUIs of all vendor-specific elements.

    The first occurrence of each OUI wins; OUIs missing from the
    built-in table are named by their own hex string.
    """
    result: list[VendorSpecificIE] = []
    seen: set[str] = set()
    for element in elements:
        if element.id != IE_VENDOR_SPECIFIC or len(element.payload) < 3:
            continue
        oui = format_oui(element.payload)
        if oui in seen:
            continue
        seen.add(oui)
        result.append(VendorSpecificIE(oui_hex=oui, vendor_name=KNOWN_OUIS.get(oui, oui)))
    return result


# ===================================================================== #
#  One-shot report
# ===================================================================== #


def decode_report(buffer: bytes | None, primary_channel: int = 0) -> IEReport:
    """Run every extractor over one raw IE buffer."""
    elements = parse_elements(buffer)
    return IEReport(
        cipher_info=extract_cipher_info(elements),
        bss_load=extract_bss_load(elements),
        vendor_specific_ies=extract_vendor_specific_ies(elements),
        secondary_channel_offset=extract_secondary_channel_offset(elements),
        secondary_channels=extract_secondary_channels(primary_channel, elements),
    )
