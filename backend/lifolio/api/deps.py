"""Shared API helpers for bearer authentication and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from lifolio.core.errors import APIError, ServiceUnavailable, Unauthorized
from lifolio.core.extensions import get_token_service
from lifolio.services._shared.errors import AuthenticationError
from lifolio.services._shared.ports import Principal
from lifolio.services.auth.dto import RejectionReason
from lifolio.services.auth.service import UNKNOWN_USER

F = TypeVar("F", bound=Callable[..., Any])

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "

# Rejection reason -> (client message, stable error code)
_UNAUTHORIZED: Mapping[str, tuple[str, str]] = {
    RejectionReason.MALFORMED.value: ("Malformed or wrongly signed token", "malformed_token"),
    RejectionReason.EXPIRED.value: ("Token has expired", "expired_token"),
    RejectionReason.POSSIBLE_HIJACK.value: (
        "Token was revoked by logout; possible hijack",
        "hijack_suspected",
    ),
    UNKNOWN_USER: ("User no longer exists", "unknown_user"),
}


def extract_bearer_token() -> str:
    """Return the raw token from ``Authorization: Bearer <token>``.

    :raises Unauthorized: If the header is missing or not a bearer credential.
    """

    header = request.headers.get(AUTHORIZATION_HEADER, "")
    if not header.startswith(BEARER_PREFIX):
        raise Unauthorized("Missing bearer token", code="missing_token")
    token = header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthorized("Missing bearer token", code="missing_token")
    return token


def to_api_error(err: AuthenticationError) -> APIError:
    """Translate a service authentication failure into its HTTP error."""

    if err.reason == RejectionReason.STORE_UNAVAILABLE.value:
        return ServiceUnavailable(
            "Token revocation status could not be checked",
            code="revocation_store_unavailable",
        )
    message, code = _UNAUTHORIZED.get(err.reason, ("Unauthorized", "unauthorized"))
    return Unauthorized(message, code=code)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-revoked access token.

    On success the principal and raw token are available through
    :func:`current_principal` and ``g.access_token``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_bearer_token()
        try:
            principal = get_token_service().authenticate(token)
        except AuthenticationError as err:
            raise to_api_error(err) from err
        g.access_token = token
        g.principal = principal
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_principal() -> Principal:
    """Return the principal set by :func:`require_auth`."""

    return cast(Principal, g.principal)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
