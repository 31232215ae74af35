"""
AirScope Output
================

Console rendering of snapshots and decode reports.
"""

from airscope.output.console import AirScopeConsoleOutput

__all__ = ["AirScopeConsoleOutput"]
