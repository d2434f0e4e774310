"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Loads .env in development (no-op when the file does not exist)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_ACCESS_SECRET: str
        HMAC secret signing access tokens.
    JWT_REFRESH_SECRET: str
        HMAC secret signing refresh tokens. Must differ from the access secret.
    JWT_ACCESS_TOKEN_SECONDS: int
        Access token lifetime in seconds.
    JWT_REFRESH_TOKEN_SECONDS: int
        Refresh token lifetime in seconds.
    REDIS_URL: str | None
        Connection URL of the revocation store. When unset an in-process store
        is used, which is only correct for a single worker.
    REDIS_KEY_PREFIX: str
        Namespace prepended to every revocation store key.
    REVOCATION_STORE_TIMEOUT: float
        Socket/connect timeout (seconds) for each store round trip.
    REQUIRE_REDIS: bool
        Refuse to start without ``REDIS_URL``.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes. They are read once at startup and
    never rotated at runtime.
    """

    API_BASE_PREFIX = "/api"

    # Secrets
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "CHANGE_ME_ACCESS")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "CHANGE_ME_REFRESH")
    JWT_ACCESS_TOKEN_SECONDS = env_int("JWT_ACCESS_TOKEN_SECONDS", 1800)
    JWT_REFRESH_TOKEN_SECONDS = env_int("JWT_REFRESH_TOKEN_SECONDS", 1209600)

    # Revocation store
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_KEY_PREFIX = os.getenv("REDIS_KEY_PREFIX", "")
    REVOCATION_STORE_TIMEOUT = float(os.getenv("REVOCATION_STORE_TIMEOUT", "0.5"))
    REQUIRE_REDIS = env_bool("REQUIRE_REDIS", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Never talks to a real Redis: the in-process store is used.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    JWT_ACCESS_SECRET = "testing-access-secret"
    JWT_REFRESH_SECRET = "testing-refresh-secret"
    REDIS_URL = None
    REQUIRE_REDIS = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Requires a shared Redis so revocations are visible to every worker.
    """

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False
    REQUIRE_REDIS = env_bool("REQUIRE_REDIS", True)


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
