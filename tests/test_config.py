"""Startup configuration: missing required settings must stop the app from starting."""

from __future__ import annotations

from datetime import timedelta

import pytest

from api import create_app
from api.config import AuthSettings, DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from services.exceptions import ConfigurationError


@pytest.mark.parametrize("key", ["JWT_SECRET", "DATABASE_URL"])
@pytest.mark.parametrize("value", [None, ""])
def test_missing_required_setting_is_fatal(key: str, value) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        create_app("testing", overrides={key: value})
    assert key in str(excinfo.value)


def test_unknown_revocation_mode_is_fatal() -> None:
    with pytest.raises(ConfigurationError):
        create_app("testing", overrides={"REVOCATION_KEY_MODE": "plain"})


def test_non_positive_timeout_is_fatal() -> None:
    with pytest.raises(ConfigurationError):
        create_app("testing", overrides={"STORE_TIMEOUT_SECONDS": 0})


def test_settings_snapshot_is_read_only() -> None:
    settings = AuthSettings.from_mapping(
        {"JWT_SECRET": "s" * 32, "DATABASE_URL": "sqlite://"}
    )
    assert settings.token_lifetime == timedelta(hours=24)
    assert settings.revocation_key_mode == "token"
    assert settings.store_timeout == 5.0
    with pytest.raises(AttributeError):
        settings.jwt_secret = "changed"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("prod", ProductionConfig),
        ("production", ProductionConfig),
        ("testing", TestingConfig),
        ("dev", DevelopmentConfig),
    ],
)
def test_get_config(name: str, expected) -> None:
    assert get_config(name) is expected



@pytest.mark.parametrize("seconds", [3600, "3600", 86401])
def test_token_lifetime_other_than_24_hours_is_fatal(seconds) -> None:
    with pytest.raises(ConfigurationError):
        create_app("testing", overrides={"JWT_TOKEN_EXPIRES_SECONDS": seconds})


def test_token_lifetime_from_environment_string() -> None:
    settings = AuthSettings.from_mapping(
        {"JWT_SECRET": "s" * 32, "DATABASE_URL": "sqlite://", "JWT_TOKEN_EXPIRES_SECONDS": "86400"}
    )
    assert settings.token_lifetime == timedelta(hours=24)


@pytest.mark.parametrize(
    "key",
    [
        "STORE_TIMEOUT_SECONDS",
        "JWT_TOKEN_EXPIRES_SECONDS",
        "PASSWORD_HASH_TIME_COST",
        "PASSWORD_HASH_MEMORY_COST",
        "PASSWORD_HASH_PARALLELISM",
    ],
)
def test_malformed_number_is_configuration_error(key: str) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        AuthSettings.from_mapping({"JWT_SECRET": "s" * 32, "DATABASE_URL": "sqlite://", key: "five"})
    assert key in str(excinfo.value)


def test_numbers_parsed_from_strings() -> None:
    settings = AuthSettings.from_mapping(
        {
            "JWT_SECRET": "s" * 32,
            "DATABASE_URL": "sqlite://",
            "STORE_TIMEOUT_SECONDS": "2.5",
            "PASSWORD_HASH_TIME_COST": "3",
            "PASSWORD_HASH_MEMORY_COST": "",
        }
    )
    assert settings.store_timeout == 2.5
    assert settings.hash_time_cost == 3
    assert settings.hash_memory_cost is None
