# lifolio/infra/jwt/pyjwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import jwt

from lifolio.services._shared.ports import (
    Claims,
    DecodeError,
    DecodeFailure,
    TokenCodec,
    TokenKind,
)
from lifolio.services.auth.dto import AuthTokenConfig

USER_ID_CLAIM = "userId"
KIND_HEADER = "type"


def _epoch(dt: datetime) -> int:
    return int(dt.timestamp())


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class PyJWTTokenCodec(TokenCodec):
    """
    HS256 JWS codec with one secret per token kind.

    The kind is written as the ``type`` header. Expiry is compared against the
    caller-supplied ``now`` instead of PyJWT's wall clock so that the service
    clock stays the single source of time.
    """

    access_secret: str = field(repr=False)
    refresh_secret: str = field(repr=False)
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, cfg: AuthTokenConfig) -> PyJWTTokenCodec:
        return cls(access_secret=cfg.access_secret, refresh_secret=cfg.refresh_secret)

    def _secret_for(self, kind: TokenKind) -> str:
        return self.access_secret if kind is TokenKind.ACCESS else self.refresh_secret

    def encode(
        self,
        *,
        user_id: int,
        kind: TokenKind,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        payload = {
            USER_ID_CLAIM: user_id,
            "iat": _epoch(issued_at),
            "exp": _epoch(expires_at),
        }
        return jwt.encode(
            payload,
            self._secret_for(kind),
            algorithm=self.algorithm,
            headers={KIND_HEADER: kind.value},
        )

    def decode(
        self,
        raw: str,
        kind: TokenKind,
        *,
        now: datetime | None = None,
    ) -> Claims | DecodeFailure:
        if not isinstance(kind, TokenKind):
            return DecodeFailure(DecodeError.UNSUPPORTED_KIND, f"unknown token kind {kind!r}")
        if not isinstance(raw, str) or not raw.strip():
            return DecodeFailure(DecodeError.MALFORMED, "empty token")

        try:
            header = jwt.get_unverified_header(raw)
            payload = jwt.decode(
                raw,
                self._secret_for(kind),
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": [USER_ID_CLAIM, "iat", "exp"],
                },
            )
        except jwt.InvalidSignatureError as exc:
            return DecodeFailure(DecodeError.BAD_SIGNATURE, str(exc))
        except jwt.InvalidTokenError as exc:
            return DecodeFailure(DecodeError.MALFORMED, str(exc))

        if header.get(KIND_HEADER) != kind.value:
            return DecodeFailure(
                DecodeError.UNSUPPORTED_KIND,
                f"expected {kind.value!r} token, got {header.get(KIND_HEADER)!r}",
            )

        user_id = payload[USER_ID_CLAIM]
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return DecodeFailure(DecodeError.MALFORMED, "userId claim must be an integer")
        if not (_is_number(payload["iat"]) and _is_number(payload["exp"])):
            return DecodeFailure(DecodeError.MALFORMED, "iat/exp claims must be numeric")
        try:
            claims = Claims(
                user_id=user_id,
                kind=kind,
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            )
        except (OverflowError, OSError, ValueError) as exc:
            return DecodeFailure(DecodeError.MALFORMED, str(exc))

        current = now or datetime.now(UTC)
        if claims.expires_at <= current:
            return DecodeFailure(DecodeError.EXPIRED, "token has expired", claims=claims)
        return claims
