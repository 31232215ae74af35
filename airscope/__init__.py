"""
AirScope -- Wireless Environment Inspector
===========================================

AirScope decodes the IEEE 802.11 Information Elements of captured
beacons and probe responses, and builds immutable snapshots of the
connected network and its neighbours, enriched with vendor names from a
rate-limited lookup service.

Modules:
    core.engine     -- Snapshot builder and engine wiring
    core.models     -- Pydantic domain models
    parsers         -- IE decoder and built-in OUI table
    collectors      -- Interface adapters, vendor cache/resolver, aggregator
    output          -- Console output
    cli             -- Click-based command-line interface

References:
    - IEEE. (2020). IEEE Std 802.11-2020: Wireless LAN MAC and PHY
      Specifications.
    - Wi-Fi Alliance. (2018). WPA3 Specification v1.0.
"""

__version__ = "1.0.0"
__tool__ = "AirScope"
__description__ = "Wireless Environment Inspector"
