"""Global extension instances and initialization helpers."""

from __future__ import annotations

import logging
from typing import cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from lifolio.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from lifolio.infra.redis.redis_revocation_store import RedisRevocationStore
from lifolio.services._shared.ports import (
    InMemoryRevocationStore,
    PrincipalResolver,
    RevocationStore,
)
from lifolio.services.auth.dto import AuthTokenConfig
from lifolio.services.auth.service import TokenService

log = logging.getLogger(__name__)


def _build_store(app: Flask) -> RevocationStore:
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        if app.config.get("REQUIRE_REDIS"):
            raise RuntimeError("REDIS_URL is required for the revocation store.")
        app.extensions.pop("redis_client", None)
        log.warning("revocation_store.in_memory")
        return InMemoryRevocationStore()

    timeout = float(app.config.get("REVOCATION_STORE_TIMEOUT", 0.5))
    redis_client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client
    return RedisRevocationStore(redis_client, prefix=app.config.get("REDIS_KEY_PREFIX", ""))


def init_app(
    app: Flask,
    *,
    store: RevocationStore | None = None,
    principal_resolver: PrincipalResolver | None = None,
) -> None:
    """Build the token service once and attach it to ``app.extensions``.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``JWT_*`` and ``REDIS_*`` settings are read.
    store: RevocationStore | None
        Pre-built store (tests); otherwise Redis or the in-process fallback.
    principal_resolver: PrincipalResolver | None
        User directory. When ``None`` the service builds a bare principal
        from the token user id (no authorities).

    Notes
    -----
    Secrets and lifetimes are frozen into :class:`AuthTokenConfig` here and
    never re-read for the lifetime of the process.
    """
    token_cfg = AuthTokenConfig.from_mapping(app.config)
    service = TokenService(
        codec=PyJWTTokenCodec.from_config(token_cfg),
        store=store if store is not None else _build_store(app),
        token_cfg=token_cfg,
        principal_resolver=principal_resolver,
    )
    app.extensions["token_service"] = service


def get_token_service() -> TokenService:
    """Return the token service bound to the current application."""
    service = current_app.extensions.get("token_service")
    if service is None:
        raise RuntimeError("Token service is not initialized. Call init_app() first.")
    return cast(TokenService, service)
