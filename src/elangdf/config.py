"""Client configuration for elangdf."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from elangdf._constants import (
    ACCURACY_THRESHOLD_M,
    BASE_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_UDP_PORT,
    GPSD_HOST,
    GPSD_PORT,
    IP_FALLBACK_ACCURACY_M,
    IP_GEOLOCATION_URL,
    SETTINGS_FILE_NAME,
)
from elangdf.exceptions import DfConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _default_settings_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "elangdf"


@dataclasses.dataclass(frozen=True)
class DfConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the DF instrument's HTTP API.
    poll_interval : float
        Seconds between telemetry polling cycles.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    ip_geolocation_url : str
        Third-party IP geolocation endpoint used as location fallback.
    accuracy_threshold : float
        Hardware fixes with a worse accuracy (metres) are marked untrusted.
    ip_fallback_accuracy : float
        Accuracy (metres) attached to IP geolocation fixes.
    gpsd_enabled : bool
        Use a local gpsd daemon as the hardware location source.
    gpsd_host : str
        gpsd host.
    gpsd_port : int
        gpsd TCP port.
    gpsd_timeout : float
        Seconds to wait for a fix before reporting a timeout.
    settings_dir : Path
        Directory holding the persisted settings document.
    settings_file : str
        File name of the persisted settings document.
    udp_port : int
        Default port of the numeric UDP link.
    """

    base_url: str = BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = 5.0
    ip_geolocation_url: str = IP_GEOLOCATION_URL
    accuracy_threshold: float = ACCURACY_THRESHOLD_M
    ip_fallback_accuracy: float = IP_FALLBACK_ACCURACY_M
    gpsd_enabled: bool = True
    gpsd_host: str = GPSD_HOST
    gpsd_port: int = GPSD_PORT
    gpsd_timeout: float = 10.0
    settings_dir: Path = dataclasses.field(default_factory=_default_settings_dir)
    settings_file: str = SETTINGS_FILE_NAME
    udp_port: int = DEFAULT_UDP_PORT

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise DfConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if not self.base_url:
            raise DfConfigError("base_url must be non-empty")
        # Allow plain strings for settings_dir (env vars, CLI flags).
        if not isinstance(self.settings_dir, Path):
            object.__setattr__(self, "settings_dir", Path(self.settings_dir))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def settings_path(self) -> Path:
        """Full path of the persisted settings document."""
        return self.settings_dir / self.settings_file

    @classmethod
    def from_env(cls, **overrides: Any) -> DfConfig:
        """Create configuration from ``ELANGDF_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "ELANGDF_BASE_URL": "base_url",
            "ELANGDF_IP_GEOLOCATION_URL": "ip_geolocation_url",
            "ELANGDF_GPSD_HOST": "gpsd_host",
            "ELANGDF_SETTINGS_DIR": "settings_dir",
            "ELANGDF_SETTINGS_FILE": "settings_file",
        }
        _ENV_FLOAT_MAP = {
            "ELANGDF_POLL_INTERVAL": "poll_interval",
            "ELANGDF_REQUEST_TIMEOUT": "request_timeout",
            "ELANGDF_ACCURACY_THRESHOLD": "accuracy_threshold",
            "ELANGDF_IP_FALLBACK_ACCURACY": "ip_fallback_accuracy",
            "ELANGDF_GPSD_TIMEOUT": "gpsd_timeout",
        }
        _ENV_INT_MAP = {
            "ELANGDF_GPSD_PORT": "gpsd_port",
            "ELANGDF_UDP_PORT": "udp_port",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None:
                    config_kwargs[field_name] = float(val)
            for env_key, field_name in _ENV_INT_MAP.items():
                val = env.get(env_key)
                if val is not None:
                    config_kwargs[field_name] = int(val)
        except ValueError as exc:
            raise DfConfigError(f"Invalid numeric environment value: {exc}") from exc

        if "gpsd_enabled" not in overrides:
            config_kwargs["gpsd_enabled"] = _env_bool(env.get("ELANGDF_GPSD_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
