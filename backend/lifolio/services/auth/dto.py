# lifolio/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any

# --------------------------- Result DTOs ---------------------------------- #


class RejectionReason(Enum):
    """Why an access token was refused by :meth:`TokenService.validate`."""

    MALFORMED = "malformed"
    EXPIRED = "expired"
    POSSIBLE_HIJACK = "possible_hijack"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True, slots=True)
class Accepted:
    """
    Successful validation.

    :param user_id: Owner of the access token.
    :type user_id: int
    """

    user_id: int


@dataclass(frozen=True, slots=True)
class Rejected:
    """
    Failed validation.

    :param reason: Rejection category.
    :type reason: RejectionReason
    :param user_id: Token owner, when the signature could be verified.
    :type user_id: int | None
    """

    reason: RejectionReason
    user_id: int | None = None


ValidationResult = Accepted | Rejected


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration, built once at startup.

    :param access_secret: HMAC secret for access tokens.
    :type access_secret: str
    :param refresh_secret: HMAC secret for refresh tokens.
    :type refresh_secret: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_secret: str = field(repr=False)
    refresh_secret: str = field(repr=False)
    access_expires: timedelta = timedelta(minutes=30)
    refresh_expires: timedelta = timedelta(days=14)

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Access and refresh secrets must be non-empty.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets.")
        if self.access_expires <= timedelta(0) or self.refresh_expires <= timedelta(0):
            raise ValueError("Token lifetimes must be positive.")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """
        Build the value from a Flask-style config mapping.

        :param config: Mapping holding the ``JWT_*`` keys.
        :returns: Immutable token configuration.
        :raises ValueError: If secrets are missing/identical or lifetimes invalid.
        """
        return cls(
            access_secret=str(config.get("JWT_ACCESS_SECRET") or ""),
            refresh_secret=str(config.get("JWT_REFRESH_SECRET") or ""),
            access_expires=timedelta(seconds=int(config.get("JWT_ACCESS_TOKEN_SECONDS", 1800))),
            refresh_expires=timedelta(
                seconds=int(config.get("JWT_REFRESH_TOKEN_SECONDS", 1209600))
            ),
        )
