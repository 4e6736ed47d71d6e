"""Application configuration accessors.

Centralizes environment variable parsing & defaults. Values are read at
call time so tests (and operators restarting with new env) never see a
stale snapshot.
"""
from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

APP_NAME = "shiptrack"
APP_VERSION = "0.1.0"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SITE_NAME = "ShipTrack"
DEFAULT_DELETE_CONFIRM_DELAY = 0.8
DEFAULT_PANEL_STATE_TTL = 3600.0
DEFAULT_SHIPMENT_CACHE_TTL = 30.0
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _clean_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def _env_float(name: str, default: float) -> float:
    raw = _clean_env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def log_level_name() -> str:
    return _raw_env("SHIPTRACK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


@lru_cache(maxsize=1)
def _process_secret() -> str:
    return secrets.token_hex(32)


def secret_key() -> str:
    """Flask session signing key (SHIPTRACK_SECRET_KEY).

    Falls back to a random per-process key, which invalidates sessions on
    restart and does not work across multiple workers.
    """
    return _clean_env("SHIPTRACK_SECRET_KEY") or _process_secret()


def site_name() -> str:
    return _clean_env("SHIPTRACK_SITE_NAME") or DEFAULT_SITE_NAME


def admin_token() -> Optional[str]:
    """Shared admin token (SHIPTRACK_ADMIN_TOKEN). Admin login is disabled when unset."""
    return _clean_env("SHIPTRACK_ADMIN_TOKEN")


def delete_confirm_delay() -> float:
    """Seconds a removal control stays in 'please wait' before delete is allowed."""
    return _env_float("SHIPTRACK_DELETE_CONFIRM_DELAY", DEFAULT_DELETE_CONFIRM_DELAY)


def panel_state_ttl() -> float:
    return _env_float("SHIPTRACK_PANEL_STATE_TTL", DEFAULT_PANEL_STATE_TTL)


def media_host_public_url() -> Optional[str]:
    """Unsigned upload endpoint of the media host (MEDIA_HOST_PUBLIC_URL)."""
    return _clean_env("MEDIA_HOST_PUBLIC_URL")


def media_host_upload_preset() -> Optional[str]:
    return _clean_env("MEDIA_HOST_UPLOAD_PRESET")


def shipment_api_base() -> Optional[str]:
    """Base URL for the shipment API (SHIPMENT_API_URL), trailing slash stripped."""
    value = _clean_env("SHIPMENT_API_URL")
    return value.rstrip("/") if value else None


def shipment_api_token() -> Optional[str]:
    return _clean_env("SHIPMENT_API_TOKEN")


def shipment_cache_ttl() -> float:
    return _env_float("SHIPMENT_API_CACHE_TTL", DEFAULT_SHIPMENT_CACHE_TTL)


@dataclass(frozen=True)
class MediaHostSettings:
    public_url: Optional[str]
    upload_preset: Optional[str]

    @property
    def configured(self) -> bool:
        return bool(self.public_url and self.upload_preset)


def media_host_settings() -> MediaHostSettings:
    return MediaHostSettings(
        public_url=media_host_public_url(),
        upload_preset=media_host_upload_preset(),
    )


def summarize_runtime_config() -> dict:
    settings = media_host_settings()
    return {
        "version": APP_VERSION,
        "log_level": log_level_name(),
        "site_name": site_name(),
        "admin_enabled": admin_token() is not None,
        "media_host_configured": settings.configured,
        "shipment_api": shipment_api_base(),
        "delete_confirm_delay": delete_confirm_delay(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "MediaHostSettings",
    "env_bool",
    "log_level_name",
    "secret_key",
    "site_name",
    "admin_token",
    "delete_confirm_delay",
    "panel_state_ttl",
    "media_host_public_url",
    "media_host_upload_preset",
    "media_host_settings",
    "shipment_api_base",
    "shipment_api_token",
    "shipment_cache_ttl",
    "summarize_runtime_config",
]
