# lifolio/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from lifolio.services._shared.errors import (
    AuthenticationError,
    InvalidTokenError,
    LogoutError,
    RevocationStoreError,
)
from lifolio.services._shared.ports import (
    Claims,
    DecodeError,
    DecodeFailure,
    Principal,
    PrincipalResolver,
    RevocationStore,
    TokenCodec,
    TokenKind,
)
from lifolio.services.auth.dto import (
    Accepted,
    AuthTokenConfig,
    Rejected,
    RejectionReason,
    TokenPairOut,
    ValidationResult,
)

log = logging.getLogger(__name__)

UNKNOWN_USER = "unknown_user"


class TokenService:
    """
    Access/refresh token lifecycle (issue / validate / logout).

    Tokens are self-contained and signed via a pluggable TokenCodec; early death
    of an access token is recorded as data in the RevocationStore (TTL-bounded
    key per logged-out token), so every instance behind the load balancer sees
    the same state.

    Access-token states::

        ISSUED -> VALID (each check) -> EXPIRED | REVOKED

    ``EXPIRED`` is derived from the token alone; ``REVOKED`` from the store.
    Both are terminal.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        store: RevocationStore,
        token_cfg: AuthTokenConfig,
        principal_resolver: PrincipalResolver | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Adapter for signing/verifying tokens.
        :param store: TTL key/value store holding revocation entries and refresh markers.
        :param token_cfg: Secrets and lifetimes (immutable for the process lifetime).
        :param principal_resolver: Loads the user behind an accepted token.
        :param clock: Returns the current aware UTC datetime; defaults to the wall clock.
        """
        self.codec = codec
        self.store = store
        self.cfg = token_cfg
        self.resolver = principal_resolver
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_access_token(self, user_id: int) -> str:
        """Sign a new access token for ``user_id``. No store write."""
        return self._issue(user_id, TokenKind.ACCESS, self.cfg.access_expires)

    def issue_refresh_token(self, user_id: int) -> str:
        """Sign a new refresh token for ``user_id``. No store write."""
        return self._issue(user_id, TokenKind.REFRESH, self.cfg.refresh_expires)

    def issue_token_pair(self, user_id: int) -> TokenPairOut:
        """
        Issue an access/refresh pair and record the refresh marker.

        The marker (key = user id, value = refresh token) is what
        :meth:`logout` clears.

        :raises RevocationStoreError: If the marker cannot be written.
        """
        access = self.issue_access_token(user_id)
        refresh = self.issue_refresh_token(user_id)
        self.store.put(self.refresh_marker_key(user_id), refresh, self.cfg.refresh_expires)
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def _issue(self, user_id: int, kind: TokenKind, lifetime: timedelta) -> str:
        now = self.now_utc()
        return self.codec.encode(
            user_id=user_id, kind=kind, issued_at=now, expires_at=now + lifetime
        )

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(self, raw_access_token: str) -> ValidationResult:
        """
        Check an access token against its signature, expiry and the store.

        Malformed and expired tokens are decided without any store access.
        A store failure is reported as ``STORE_UNAVAILABLE`` and never as
        accepted.
        """
        decoded = self.codec.decode(raw_access_token, TokenKind.ACCESS, now=self.now_utc())
        if isinstance(decoded, DecodeFailure):
            if decoded.reason is DecodeError.EXPIRED:
                user_id = decoded.claims.user_id if decoded.claims else None
                return self._reject(RejectionReason.EXPIRED, user_id)
            return self._reject(RejectionReason.MALFORMED, None, detail=decoded.detail)

        try:
            logged_out_by = self.store.get(raw_access_token)
        except RevocationStoreError:
            log.error(
                "revocation_store.unavailable",
                exc_info=True,
                extra={"user_id": decoded.user_id},
            )
            return self._reject(RejectionReason.STORE_UNAVAILABLE, decoded.user_id)

        if logged_out_by is None:
            return Accepted(decoded.user_id)
        if logged_out_by == str(decoded.user_id):
            # This exact token was revoked by its owner's logout and is being replayed.
            return self._reject(RejectionReason.POSSIBLE_HIJACK, decoded.user_id)
        # An entry written for another user id does not revoke this token.
        return Accepted(decoded.user_id)

    def authenticate(self, raw_access_token: str) -> Principal:
        """
        Validate the token and resolve the principal behind it.

        :raises AuthenticationError: With the rejection reason value, or
            ``"unknown_user"`` if the resolver does not know the user.
        """
        result = self.validate(raw_access_token)
        if isinstance(result, Rejected):
            raise AuthenticationError(result.reason.value, result.user_id)
        if self.resolver is None:
            return Principal(user_id=result.user_id, username=str(result.user_id))
        principal = self.resolver.resolve(result.user_id)
        if principal is None:
            log.info("token.rejected", extra={"reason": UNKNOWN_USER, "user_id": result.user_id})
            raise AuthenticationError(UNKNOWN_USER, result.user_id)
        return principal

    def _reject(
        self, reason: RejectionReason, user_id: int | None, *, detail: str = ""
    ) -> Rejected:
        log.info(
            "token.rejected",
            extra={"reason": reason.value, "user_id": user_id, "detail": detail or None},
        )
        return Rejected(reason=reason, user_id=user_id)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int, raw_access_token: str) -> None:
        """
        Revoke ``raw_access_token`` for the rest of its lifetime.

        Writes ``token -> user_id`` with TTL equal to the token's remaining
        lifetime (zero for an already expired token), then clears the user's
        refresh marker. Calling it twice has the same effect as once.

        :raises InvalidTokenError: If the token signature/structure is invalid.
        :raises LogoutError: If the revocation entry could not be written.
        """
        now = self.now_utc()
        remaining = max(self._verified_claims(raw_access_token, now).expires_at - now, timedelta(0))

        try:
            self.store.put(raw_access_token, str(user_id), remaining)
        except RevocationStoreError as exc:
            log.error("token.logout_failed", exc_info=True, extra={"user_id": user_id})
            raise LogoutError() from exc

        try:
            self.store.delete(self.refresh_marker_key(user_id))
        except RevocationStoreError:
            # Best effort: the access-token entry is already in place.
            log.warning(
                "token.refresh_marker_delete_failed", exc_info=True, extra={"user_id": user_id}
            )

        log.info(
            "token.logout",
            extra={"user_id": user_id, "ttl_seconds": int(remaining.total_seconds())},
        )

    def expires_at(self, raw_access_token: str) -> datetime:
        """
        Return the expiry of a signed access token, expired or not.

        :raises InvalidTokenError: If the token cannot be verified.
        """
        return self._verified_claims(raw_access_token, self.now_utc()).expires_at

    def _verified_claims(self, raw_access_token: str, now: datetime) -> Claims:
        decoded = self.codec.decode(raw_access_token, TokenKind.ACCESS, now=now)
        if isinstance(decoded, Claims):
            return decoded
        if decoded.reason is DecodeError.EXPIRED and decoded.claims is not None:
            return decoded.claims
        raise InvalidTokenError(decoded.reason.value, decoded.detail)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def refresh_marker_key(user_id: int) -> str:
        """Store key of the refresh marker for ``user_id``."""
        return str(user_id)

    def now_utc(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return datetime.now(UTC)
