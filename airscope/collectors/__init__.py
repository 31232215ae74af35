"""
AirScope Collectors
====================

Wireless interface adapters, the vendor cache and resolver, and the
concurrent scan aggregator.
"""

from airscope.collectors.interface import (
    CaptureFileInterface,
    CaptureFormatError,
    WirelessInterface,
)
from airscope.collectors.scan_aggregator import ScanAggregator
from airscope.collectors.vendor_cache import LOOKUP_FAILED, VendorCache
from airscope.collectors.vendor_resolver import (
    MacVendorsLookup,
    OfflineVendorLookup,
    VendorLookup,
    VendorResolver,
)

__all__ = [
    "CaptureFileInterface",
    "CaptureFormatError",
    "LOOKUP_FAILED",
    "MacVendorsLookup",
    "OfflineVendorLookup",
    "ScanAggregator",
    "VendorCache",
    "VendorLookup",
    "VendorResolver",
    "WirelessInterface",
]
