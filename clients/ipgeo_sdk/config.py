from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:5000/api/"
DEFAULT_LOOKUP_BASE_URL = "https://ipinfo.io/"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SDKConfig:
    api_base_url: str = DEFAULT_API_BASE_URL
    lookup_base_url: str = DEFAULT_LOOKUP_BASE_URL
    lookup_token: str | None = None
    timeout_seconds: float = 15.0
    verify_ssl: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "SDKConfig":
        """Load config from environment with optional .env override."""
        load_dotenv(env_file)
        timeout_seconds = _read_float("IPGEO_TIMEOUT_SECONDS", "15")
        if timeout_seconds <= 0:
            raise ConfigError(f"Invalid IPGEO_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}")
        return cls(
            api_base_url=_normalize_base_url(os.getenv("IPGEO_API_BASE_URL", ""), DEFAULT_API_BASE_URL),
            lookup_base_url=_normalize_base_url(os.getenv("IPGEO_LOOKUP_BASE_URL", ""), DEFAULT_LOOKUP_BASE_URL),
            lookup_token=(os.getenv("IPGEO_LOOKUP_TOKEN") or "").strip() or None,
            timeout_seconds=timeout_seconds,
            verify_ssl=parse_bool(os.getenv("IPGEO_VERIFY_SSL"), default=True),
            log_level=(os.getenv("IPGEO_LOG_LEVEL") or "INFO").strip().upper() or "INFO",
        )


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _normalize_base_url(value: str, default: str) -> str:
    normalized = value.strip()
    if not normalized:
        return default
    return normalized if normalized.endswith("/") else f"{normalized}/"


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default

    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default
