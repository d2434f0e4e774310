"""Pytest fixtures wiring the token service to in-memory collaborators.

Time is driven by :class:`FakeClock` so expiry and TTL behaviour can be
tested without sleeping; the same clock feeds the service and the store.
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask
from lifolio.factory import create_app
from lifolio.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from lifolio.services._shared.ports import InMemoryPrincipalResolver, InMemoryRevocationStore
from lifolio.services.auth.dto import AuthTokenConfig
from lifolio.services.auth.service import TokenService

T0 = datetime(2025, 1, 1, tzinfo=UTC)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now

    def set(self, seconds_since_t0: float) -> datetime:
        self.now = T0 + timedelta(seconds=seconds_since_t0)
        return self.now


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Never reaches a real Redis.
    - Secrets are fixed so tokens can be built by the tests.
    """

    TESTING = True
    DEBUG = False
    LOG_LEVEL = "WARNING"
    JWT_ACCESS_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    JWT_ACCESS_TOKEN_SECONDS = 3600
    JWT_REFRESH_TOKEN_SECONDS = 14 * 24 * 3600
    REDIS_URL = None
    REQUIRE_REDIS = False


@pytest.fixture()
def clock() -> FakeClock:
    """Provide a fresh clock positioned at ``T0``."""
    return FakeClock()


@pytest.fixture()
def token_cfg() -> AuthTokenConfig:
    """Secrets/lifetimes used by the worked example: 'a'/'b', one hour."""
    return AuthTokenConfig(
        access_secret="a",
        refresh_secret="b",
        access_expires=timedelta(seconds=3600),
        refresh_expires=timedelta(days=14),
    )


@pytest.fixture()
def codec(token_cfg: AuthTokenConfig) -> PyJWTTokenCodec:
    return PyJWTTokenCodec.from_config(token_cfg)


@pytest.fixture()
def store(clock: FakeClock) -> InMemoryRevocationStore:
    return InMemoryRevocationStore(clock=clock)


@pytest.fixture()
def resolver() -> InMemoryPrincipalResolver:
    resolver = InMemoryPrincipalResolver()
    resolver.register(42, "ana", ("ROLE_USER",))
    return resolver


@pytest.fixture()
def service(
    codec: PyJWTTokenCodec,
    store: InMemoryRevocationStore,
    token_cfg: AuthTokenConfig,
    resolver: InMemoryPrincipalResolver,
    clock: FakeClock,
) -> TokenService:
    """Build a TokenService wired to in-memory doubles and the fake clock."""
    return TokenService(
        codec=codec,
        store=store,
        token_cfg=token_cfg,
        principal_resolver=resolver,
        clock=clock,
    )


@pytest.fixture()
def app(resolver: InMemoryPrincipalResolver) -> Generator[Flask, None, None]:
    """Create a Flask application with an in-process revocation store."""
    application = create_app(TestConfig, principal_resolver=resolver)
    with application.app_context():
        yield application


@pytest.fixture()
def client(app: Flask):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def bare_app() -> Generator[Flask, None, None]:
    """Create a Flask application with no principal resolver configured."""
    application = create_app(TestConfig)
    with application.app_context():
        yield application
