# tests/unit/infra/test_pyjwt_token_codec.py
"""
Unit tests for PyJWTTokenCodec.

They exercise signing per token kind and every decode failure category:
bad signature, malformed structure/claims, natural expiry and kind mismatch.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from lifolio.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from lifolio.services._shared.ports import Claims, DecodeError, DecodeFailure, TokenKind

ISSUED = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
EXPIRES = ISSUED + timedelta(hours=1)


def _encode(codec: PyJWTTokenCodec, kind: TokenKind = TokenKind.ACCESS, user_id: int = 42) -> str:
    return codec.encode(user_id=user_id, kind=kind, issued_at=ISSUED, expires_at=EXPIRES)


def test_roundtrip_returns_claims(codec):
    raw = _encode(codec)
    claims = codec.decode(raw, TokenKind.ACCESS, now=ISSUED)
    assert claims == Claims(user_id=42, kind=TokenKind.ACCESS, issued_at=ISSUED, expires_at=EXPIRES)


def test_encode_is_deterministic(codec):
    assert _encode(codec) == _encode(codec)


def test_wire_format_carries_kind_header_and_user_claim(codec):
    raw = _encode(codec, TokenKind.REFRESH)
    assert jwt.get_unverified_header(raw)["type"] == "refresh"
    payload = jwt.decode(raw, "b", algorithms=["HS256"], options={"verify_exp": False})
    assert payload == {"userId": 42, "iat": int(ISSUED.timestamp()), "exp": int(EXPIRES.timestamp())}


def test_each_kind_uses_its_own_secret(codec):
    access = _encode(codec, TokenKind.ACCESS)
    refresh = _encode(codec, TokenKind.REFRESH)
    assert isinstance(codec.decode(refresh, TokenKind.REFRESH, now=ISSUED), Claims)

    wrong = codec.decode(refresh, TokenKind.ACCESS, now=ISSUED)
    assert isinstance(wrong, DecodeFailure)
    assert wrong.reason is DecodeError.BAD_SIGNATURE

    wrong = codec.decode(access, TokenKind.REFRESH, now=ISSUED)
    assert wrong.reason is DecodeError.BAD_SIGNATURE


def test_expired_token_reports_expired_with_claims(codec):
    raw = _encode(codec)
    result = codec.decode(raw, TokenKind.ACCESS, now=EXPIRES)
    assert isinstance(result, DecodeFailure)
    assert result.reason is DecodeError.EXPIRED
    assert result.claims is not None and result.claims.user_id == 42


def test_expired_token_with_bad_signature_is_bad_signature(codec):
    raw = _encode(codec, TokenKind.REFRESH)
    result = codec.decode(raw, TokenKind.ACCESS, now=EXPIRES + timedelta(days=1))
    assert result.reason is DecodeError.BAD_SIGNATURE


def test_kind_header_mismatch_is_unsupported_kind():
    # Same secret on both sides so only the header differs
    raw = jwt.encode(
        {"userId": 1, "iat": int(ISSUED.timestamp()), "exp": int(EXPIRES.timestamp())},
        "a",
        algorithm="HS256",
        headers={"type": "refresh"},
    )
    codec = PyJWTTokenCodec(access_secret="a", refresh_secret="b")
    result = codec.decode(raw, TokenKind.ACCESS, now=ISSUED)
    assert result.reason is DecodeError.UNSUPPORTED_KIND


def test_unknown_kind_is_unsupported(codec):
    raw = _encode(codec)
    result = codec.decode(raw, "session", now=ISSUED)  # type: ignore[arg-type]
    assert result.reason is DecodeError.UNSUPPORTED_KIND


@pytest.mark.parametrize(
    "payload",
    [
        {"iat": 1735732800, "exp": 1735736400},
        {"userId": "42", "iat": 1735732800, "exp": 1735736400},
        {"userId": True, "iat": 1735732800, "exp": 1735736400},
        {"userId": 42, "iat": 1735732800},
        {"userId": 42, "iat": "yesterday", "exp": 1735736400},
    ],
)
def test_missing_or_mistyped_claims_are_malformed(payload):
    raw = jwt.encode(payload, "a", algorithm="HS256", headers={"type": "access"})
    codec = PyJWTTokenCodec(access_secret="a", refresh_secret="b")
    result = codec.decode(raw, TokenKind.ACCESS, now=ISSUED)
    assert isinstance(result, DecodeFailure)
    assert result.reason is DecodeError.MALFORMED


def test_other_algorithms_are_refused(codec):
    raw = jwt.encode(
        {"userId": 42, "iat": 1735732800, "exp": 1735736400},
        "a",
        algorithm="HS512",
        headers={"type": "access"},
    )
    assert codec.decode(raw, TokenKind.ACCESS, now=ISSUED).reason is DecodeError.MALFORMED


def test_repr_hides_secrets(codec):
    assert "access_secret" not in repr(codec)
