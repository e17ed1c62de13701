"""Centralized application configuration with schema validation.

Three frozen sections (``aws``, ``logging``, ``zones``) are filled from, in
increasing precedence:
- a local ``.env`` file,
- flat environment names (for example ``AWS_DEFAULT_REGION``, ``ZONE_LOOKUP_TIMEOUT``),
- nested names (for example ``AWS__DEFAULT_REGION``, ``ZONES__LOOKUP_TIMEOUT_SECONDS``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_bool(value: object, *, default: bool) -> bool:
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


class AWSConfig(BaseModel):
    """AWS client defaults used by the services factory."""

    model_config = ConfigDict(frozen=True)

    default_region: str = Field(default="us-east-1")
    max_retries: int = Field(default=10, ge=1, le=25)
    timeout: int = Field(default=60, ge=1, le=300)
    connect_timeout: int = Field(default=5, ge=1, le=60)

    @field_validator("default_region", mode="before")
    @classmethod
    def _normalize_region(cls, value: object) -> str:
        text = str(value or "").strip()
        return text or "us-east-1"


class LoggingSettings(BaseModel):
    """Repository-wide logging settings."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    override_root_handlers: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        text = str(value or "").strip().upper()
        if text in _LOG_LEVELS:
            return text
        return "INFO"


class ZoneCacheConfig(BaseModel):
    """Availability-zone cache behavior."""

    model_config = ConfigDict(frozen=True)

    lookup_timeout_seconds: float | None = Field(default=30.0)
    retry_failed_lookup: bool = Field(default=False)

    @field_validator("lookup_timeout_seconds", mode="before")
    @classmethod
    def _normalize_timeout(cls, value: object) -> float | None:
        # Empty, zero or negative values disable the lookup deadline.
        if value is None:
            return None
        text = str(value).strip()
        if text == "":
            return None
        parsed = float(text)
        if parsed <= 0.0:
            return None
        return parsed

    @field_validator("retry_failed_lookup", mode="before")
    @classmethod
    def _normalize_retry(cls, value: object) -> bool:
        return _parse_bool(value, default=False)


class Settings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(frozen=True)

    aws: AWSConfig = Field(default_factory=AWSConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    zones: ZoneCacheConfig = Field(default_factory=ZoneCacheConfig)

    @classmethod
    def from_env(
        cls,
        *,
        env: Mapping[str, str] | None = None,
        env_file: str = ".env",
    ) -> Settings:
        """Build settings from `.env` values overridden by ``env`` (default: the process env)."""
        merged = _load_dotenv(Path(env_file))
        merged.update({str(k): str(v) for k, v in (os.environ if env is None else env).items()})
        return cls.model_validate(_build_payload(merged))


# (section, field) -> env names, first non-empty wins. Nested names come first.
_ENV_KEYS: dict[tuple[str, str], tuple[str, ...]] = {
    ("aws", "default_region"): ("AWS__DEFAULT_REGION", "AWS_DEFAULT_REGION", "AWS_REGION"),
    ("aws", "max_retries"): ("AWS__MAX_RETRIES", "AWS_MAX_RETRIES"),
    ("aws", "timeout"): ("AWS__TIMEOUT", "AWS_TIMEOUT"),
    ("aws", "connect_timeout"): ("AWS__CONNECT_TIMEOUT", "AWS_CONNECT_TIMEOUT"),
    ("logging", "level"): ("LOGGING__LEVEL", "ELBM_LOG_LEVEL"),
    ("logging", "json_logs"): ("LOGGING__JSON_LOGS", "ELBM_LOG_JSON"),
    ("logging", "override_root_handlers"): ("LOGGING__OVERRIDE_ROOT_HANDLERS", "ELBM_LOG_OVERRIDE"),
    ("zones", "lookup_timeout_seconds"): ("ZONES__LOOKUP_TIMEOUT_SECONDS", "ZONE_LOOKUP_TIMEOUT"),
    ("zones", "retry_failed_lookup"): ("ZONES__RETRY_FAILED_LOOKUP", "ZONE_RETRY_FAILED_LOOKUP"),
}


def _load_dotenv(path: Path) -> dict[str, str]:
    """Read ``KEY=value`` lines from a `.env` file; comments and junk lines are skipped."""
    if not path.is_file():
        return {}

    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def _build_payload(env: Mapping[str, str]) -> dict[str, dict[str, str]]:
    """Group the first non-empty env value of every known setting by section."""
    payload: dict[str, dict[str, str]] = {"aws": {}, "logging": {}, "zones": {}}
    for (section, field_name), keys in _ENV_KEYS.items():
        for key in keys:
            value = str(env.get(key, "")).strip()
            if value:
                payload[section][field_name] = value
                break
    return payload


_SETTINGS_LOCK = Lock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, reload: bool = False) -> Settings:
    """Return cached settings, optionally forcing reload from env."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        if reload or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings.from_env()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear in-process settings cache."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


__all__ = [
    "AWSConfig",
    "LoggingSettings",
    "Settings",
    "ZoneCacheConfig",
    "get_settings",
    "clear_settings_cache",
    "ValidationError",
]
