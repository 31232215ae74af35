"""
AirScope Core
==============

Domain models and the snapshot engine.

The engine lives in :mod:`airscope.core.engine`; it is not re-exported
here because the parsers and collectors it composes import the models
from this package.
"""

from airscope.core.models import (
    BSSLoadInfo,
    ChannelBand,
    ChannelInfo,
    ChannelWidth,
    CipherSuiteInfo,
    IEReport,
    InterfaceProperties,
    NearbyWiFiNetwork,
    PHYMode,
    ScannedNetworkRecord,
    SecurityMode,
    SignalHealth,
    VendorSpecificIE,
    WirelessSnapshot,
)

__all__ = [
    "BSSLoadInfo",
    "ChannelBand",
    "ChannelInfo",
    "ChannelWidth",
    "CipherSuiteInfo",
    "IEReport",
    "InterfaceProperties",
    "NearbyWiFiNetwork",
    "PHYMode",
    "ScannedNetworkRecord",
    "SecurityMode",
    "SignalHealth",
    "VendorSpecificIE",
    "WirelessSnapshot",
]
