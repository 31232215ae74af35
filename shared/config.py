"""
AirScope Configuration Management
==================================

Centralized configuration for the AirScope toolkit using Python
dataclasses and TOML-based persistence.

Every section maps one-to-one onto a TOML table::

    [global]
    log_level = "DEBUG"

    [lookup]
    base_url = "https://api.macvendors.com/"
    timeout = 10.0

    [scan]
    stagger_step = 0.1

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "airscope.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and general operational settings."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    version: str = "1.0.0"


@dataclass(frozen=False, slots=True)
class LookupConfig:
    """Vendor lookup endpoint and retry policy.

    ``negative_ttl`` controls how long a definitive "unknown vendor"
    answer (HTTP 404) stays cached.  ``0`` keeps it for the process
    lifetime.
    """

    base_url: str = "https://api.macvendors.com/"
    timeout: float = 10.0
    max_retries: int = 2
    rate_limit_backoff: float = 1.0
    transient_backoff: float = 0.5
    negative_ttl: float = 0.0
    user_agent: str = "AirScope/1.0"


@dataclass(frozen=False, slots=True)
class ScanConfig:
    """Scan aggregation parameters.

    Staggering spreads the start of vendor lookups across
    ``stagger_slots`` buckets of ``stagger_step`` seconds each.
    """

    stagger_step: float = 0.1
    stagger_slots: int = 10
    key_by_oui: bool = False
    require_ssid: bool = True


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class AirScopeConfig:
    """Master configuration aggregating every section.

    Usage:
        >>> config = AirScopeConfig.load()                 # from default path
        >>> config = AirScopeConfig.load("custom.toml")    # from custom path
        >>> config.lookup.max_retries
        2
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> AirScopeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``airscope.toml`` in
        the project root and silently falls back to defaults when it is
        absent.

        Raises:
            FileNotFoundError: If *path* was given explicitly and does
                not exist.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            lookup=cls._build_section(LookupConfig, raw.get("lookup", {})),
            scan=cls._build_section(ScanConfig, raw.get("scan", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)
