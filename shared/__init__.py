"""
AirScope Shared Module
======================

Common infrastructure shared by the AirScope packages: configuration,
structured logging, the Rich console wrapper, and the async HTTP client.
"""

from shared.config import AirScopeConfig

__all__ = ["AirScopeConfig"]
