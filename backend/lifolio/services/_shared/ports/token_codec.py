from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol


class TokenKind(str, Enum):
    """Token families; each one is signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


class DecodeError(Enum):
    """Why a raw token could not be turned into :class:`Claims`."""

    BAD_SIGNATURE = "bad_signature"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    UNSUPPORTED_KIND = "unsupported_kind"


@dataclass(frozen=True, slots=True)
class Claims:
    """
    Verified token payload.

    :ivar user_id: Token owner.
    :ivar kind: Token family the signature was verified for.
    :ivar issued_at: Issue instant (UTC, whole seconds).
    :ivar expires_at: Absolute expiration (UTC, whole seconds).
    """

    user_id: int
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """
    Decode outcome for a token that is not currently usable.

    ``claims`` is only set for :attr:`DecodeError.EXPIRED`: the signature was
    verified, so the payload can still be trusted for bookkeeping (logout).
    """

    reason: DecodeError
    detail: str = ""
    claims: Claims | None = None


class TokenCodec(Protocol):
    """Port for signing and verifying tokens."""

    def encode(
        self,
        *,
        user_id: int,
        kind: TokenKind,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str: ...

    def decode(
        self,
        raw: str,
        kind: TokenKind,
        *,
        now: datetime | None = None,
    ) -> Claims | DecodeFailure: ...
