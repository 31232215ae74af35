"""
AirScope Module Entry Point
============================

Allows running the AirScope CLI via: python -m airscope
"""

from airscope.cli import main

if __name__ == "__main__":
    main()
