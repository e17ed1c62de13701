"""Unit tests for centralized configuration parsing and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from infra.config import Settings, ValidationError, clear_settings_cache, get_settings


def test_settings_defaults() -> None:
    settings = Settings.from_env(env={}, env_file=".missing.env")

    assert settings.aws.default_region == "us-east-1"
    assert settings.logging.level == "INFO"
    assert settings.logging.json_logs is False
    assert settings.zones.lookup_timeout_seconds == 30.0
    assert settings.zones.retry_failed_lookup is False


def test_settings_reads_flat_env_keys() -> None:
    """Flat env keys should map to nested settings models."""
    env = {
        "AWS_DEFAULT_REGION": "eu-west-3",
        "AWS_MAX_RETRIES": "7",
        "ELBM_LOG_LEVEL": "debug",
        "ELBM_LOG_JSON": "1",
        "ZONE_LOOKUP_TIMEOUT": "2.5",
        "ZONE_RETRY_FAILED_LOOKUP": "yes",
    }
    settings = Settings.from_env(env=env, env_file=".missing.env")

    assert settings.aws.default_region == "eu-west-3"
    assert settings.aws.max_retries == 7
    assert settings.logging.level == "DEBUG"
    assert settings.logging.json_logs is True
    assert settings.zones.lookup_timeout_seconds == 2.5
    assert settings.zones.retry_failed_lookup is True


def test_settings_reads_nested_env_keys() -> None:
    """Nested env keys should be supported with `__` delimiter and win over flat ones."""
    env = {
        "AWS__DEFAULT_REGION": "us-west-2",
        "AWS_DEFAULT_REGION": "eu-west-1",
        "ZONES__LOOKUP_TIMEOUT_SECONDS": "10",
        "LOGGING__OVERRIDE_ROOT_HANDLERS": "true",
    }
    settings = Settings.from_env(env=env, env_file=".missing.env")

    assert settings.aws.default_region == "us-west-2"
    assert settings.zones.lookup_timeout_seconds == 10.0
    assert settings.logging.override_root_handlers is True


def test_aws_region_is_used_as_last_resort() -> None:
    settings = Settings.from_env(env={"AWS_REGION": "ca-central-1"}, env_file=".missing.env")
    assert settings.aws.default_region == "ca-central-1"


@pytest.mark.parametrize("raw", ["0", "-1"])
def test_non_positive_zone_timeout_disables_timeout(raw: str) -> None:
    settings = Settings.from_env(env={"ZONE_LOOKUP_TIMEOUT": raw}, env_file=".missing.env")
    assert settings.zones.lookup_timeout_seconds is None


def test_invalid_zone_timeout_raises_validation_error() -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(env={"ZONE_LOOKUP_TIMEOUT": "soon"}, env_file=".missing.env")


def test_settings_invalid_retries_raises_validation_error() -> None:
    """Invalid constrained values should fail schema validation."""
    with pytest.raises(ValidationError):
        Settings.from_env(env={"AWS_MAX_RETRIES": "0"}, env_file=".missing.env")


def test_settings_invalid_log_level_falls_back_to_info() -> None:
    settings = Settings.from_env(env={"ELBM_LOG_LEVEL": "chatty"}, env_file=".missing.env")
    assert settings.logging.level == "INFO"


def test_dotenv_values_are_overridden_by_process_env(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local overrides\nAWS_DEFAULT_REGION='eu-central-1'\nZONE_RETRY_FAILED_LOOKUP=1\nnot a pair\n",
        encoding="utf-8",
    )

    settings = Settings.from_env(env={"ZONE_RETRY_FAILED_LOOKUP": "0"}, env_file=str(env_file))

    assert settings.aws.default_region == "eu-central-1"
    assert settings.zones.retry_failed_lookup is False


def test_settings_are_frozen() -> None:
    settings = Settings.from_env(env={}, env_file=".missing.env")
    with pytest.raises(ValidationError):
        settings.aws.default_region = "eu-west-3"  # type: ignore[misc]


def test_get_settings_reload_rebuilds_cache(monkeypatch: Any) -> None:
    """Reload should rebuild cached settings from current process env."""
    clear_settings_cache()
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    first = get_settings(reload=True)

    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-2")
    second = get_settings(reload=True)
    cached = get_settings()

    assert first.aws.default_region == "eu-west-1"
    assert second.aws.default_region == "eu-west-2"
    assert cached is second
    clear_settings_cache()
