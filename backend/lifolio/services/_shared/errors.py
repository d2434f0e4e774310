"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask, HTTP, or Redis directly. They serve as stable contracts between
store adapters, the token service and the API boundary.

The translation to HTTP responses (RFC 7807) is handled by
``lifolio/core/errors.py`` and ``lifolio/api/deps.py``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from store adapters or the token service.
    - The API layer will later translate them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class RevocationStoreError(ServiceError):
    """
    Raised by revocation store adapters when a round trip cannot complete.

    Covers connection failures, timeouts and protocol errors alike; callers
    must never interpret it as "entry absent".
    """


@dataclass(slots=True)
class InvalidTokenError(ServiceError):
    """
    Raised when an operation needs a verifiable token and did not get one.

    :param reason: Stable machine-readable reason (e.g. ``"bad_signature"``).
    :type reason: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    reason: str
    detail: str = ""

    def __str__(self) -> str:  # pragma: no cover
        return f"Invalid token ({self.reason}): {self.detail}" if self.detail else self.reason


@dataclass(slots=True)
class AuthenticationError(ServiceError):
    """
    Raised when a bearer token cannot be turned into a principal.

    :param reason: Rejection reason value (see ``RejectionReason``) or
        ``"unknown_user"`` when the resolver no longer knows the user.
    :type reason: str
    :param user_id: Token owner when the token could be decoded.
    :type user_id: int | None
    """

    reason: str
    user_id: int | None = None

    def __str__(self) -> str:  # pragma: no cover
        return f"Authentication failed: {self.reason}"


class LogoutError(ServiceError):
    """Raised when the access-token revocation write of a logout fails."""

    def __init__(self, message: str = "Logout could not be recorded") -> None:
        super().__init__(message)
