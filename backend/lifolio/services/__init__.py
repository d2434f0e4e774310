"""Service layer public API.

This package exposes the token service and its DTOs so that callers can
import from :mod:`lifolio.services` without knowing internal structure.

Re-exports
----------
- Token service (from ``lifolio.services.auth``)
    * :class:`TokenService`
    * DTOs: :class:`AuthTokenConfig`, :class:`TokenPairOut`,
      :class:`Accepted`, :class:`Rejected`, :class:`RejectionReason`

- Errors (from ``lifolio.services._shared.errors``)
    * :class:`ServiceError` and its token-specific subclasses
"""

from __future__ import annotations

from lifolio.services._shared.errors import (
    AuthenticationError,
    InvalidTokenError,
    LogoutError,
    RevocationStoreError,
    ServiceError,
)
from lifolio.services.auth.dto import (
    Accepted,
    AuthTokenConfig,
    Rejected,
    RejectionReason,
    TokenPairOut,
    ValidationResult,
)
from lifolio.services.auth.service import TokenService

__all__ = [
    "Accepted",
    "AuthTokenConfig",
    "AuthenticationError",
    "InvalidTokenError",
    "LogoutError",
    "Rejected",
    "RejectionReason",
    "RevocationStoreError",
    "ServiceError",
    "TokenPairOut",
    "TokenService",
    "ValidationResult",
]
