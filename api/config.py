"""
Environment-aware configuration.

The config classes only carry raw values (environment strings, or literals
in TestingConfig). AuthSettings.from_mapping() parses and validates them
once at startup; anything missing or malformed raises ConfigurationError and
create_app() refuses to start.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from dotenv import load_dotenv

from services.exceptions import ConfigurationError
from stores.revocation_store import KEY_MODES

load_dotenv()  # Read .env if present

REQUIRED_KEYS = ("JWT_SECRET", "DATABASE_URL")
TOKEN_LIFETIME = timedelta(hours=24)


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL")
    STORE_TIMEOUT_SECONDS = os.getenv("STORE_TIMEOUT_SECONDS", "5")
    # "token" keeps the raw token in the denylist, "digest" only its sha256
    REVOCATION_KEY_MODE = os.getenv("REVOCATION_KEY_MODE", "token")

    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    # session tokens live exactly 24 hours; any other value is rejected at startup
    JWT_TOKEN_EXPIRES_SECONDS = os.getenv("JWT_TOKEN_EXPIRES_SECONDS", "86400")

    # Argon2 work factor; unset means the library default
    PASSWORD_HASH_TIME_COST = os.getenv("PASSWORD_HASH_TIME_COST")
    PASSWORD_HASH_MEMORY_COST = os.getenv("PASSWORD_HASH_MEMORY_COST")
    PASSWORD_HASH_PARALLELISM = os.getenv("PASSWORD_HASH_PARALLELISM")


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "testing-secret-with-at-least-32-bytes!!"
    STORE_TIMEOUT_SECONDS = 1.0
    JWT_TOKEN_EXPIRES_SECONDS = 86400
    # cheap hashing keeps the suite fast
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 1024
    PASSWORD_HASH_PARALLELISM = 1


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def _number(config: Mapping, key: str, parse, default=None):
    value = config.get(key)
    if value is None or value == "":
        return default
    try:
        return parse(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class AuthSettings:
    jwt_secret: str
    jwt_algorithm: str
    token_lifetime: timedelta
    database_url: str
    store_timeout: float
    revocation_key_mode: str
    hash_time_cost: int | None = None
    hash_memory_cost: int | None = None
    hash_parallelism: int | None = None

    @classmethod
    def from_mapping(cls, config: Mapping) -> "AuthSettings":
        """Validate the loaded config; missing or malformed values are fatal."""
        missing = [key for key in REQUIRED_KEYS if not config.get(key)]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        mode = config.get("REVOCATION_KEY_MODE", "token")
        if mode not in KEY_MODES:
            raise ConfigurationError(f"REVOCATION_KEY_MODE must be one of {', '.join(KEY_MODES)}")

        timeout = _number(config, "STORE_TIMEOUT_SECONDS", float, default=5.0)
        if timeout <= 0:
            raise ConfigurationError("STORE_TIMEOUT_SECONDS must be positive")

        lifetime = timedelta(
            seconds=_number(config, "JWT_TOKEN_EXPIRES_SECONDS", int, default=int(TOKEN_LIFETIME.total_seconds()))
        )
        if lifetime != TOKEN_LIFETIME:
            raise ConfigurationError("JWT_TOKEN_EXPIRES_SECONDS must be 86400 (24 hours)")

        return cls(
            jwt_secret=config["JWT_SECRET"],
            jwt_algorithm=config.get("JWT_ALGORITHM", "HS256"),
            token_lifetime=lifetime,
            database_url=config["DATABASE_URL"],
            store_timeout=timeout,
            revocation_key_mode=mode,
            hash_time_cost=_number(config, "PASSWORD_HASH_TIME_COST", int),
            hash_memory_cost=_number(config, "PASSWORD_HASH_MEMORY_COST", int),
            hash_parallelism=_number(config, "PASSWORD_HASH_PARALLELISM", int),
        )
