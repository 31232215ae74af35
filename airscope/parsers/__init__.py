"""
AirScope Parsers
=================

Pure decoding of raw 802.11 Information Element buffers and the built-in
OUI table used to name vendor-specific elements.
"""

from airscope.parsers.ie_parser import (
    InformationElement,
    decode_report,
    extract_bss_load,
    extract_cipher_info,
    extract_secondary_channel_offset,
    extract_secondary_channels,
    extract_vendor_specific_ies,
    parse_elements,
)
from airscope.parsers.oui import KNOWN_OUIS, lookup_oui, oui_prefix

__all__ = [
    "InformationElement",
    "KNOWN_OUIS",
    "decode_report",
    "extract_bss_load",
    "extract_cipher_info",
    "extract_secondary_channel_offset",
    "extract_secondary_channels",
    "extract_vendor_specific_ies",
    "lookup_oui",
    "oui_prefix",
    "parse_elements",
]
