"""
lifolio.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing, revocation storage and principal resolution.

These ports decouple the token service from concrete implementations
of JWT signing, the TTL key/value store and the user directory.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`: abstraction for signing and verifying
    tokens, plus :class:`~.Claims`, :class:`~.TokenKind` and the
    :class:`~.DecodeFailure` result type.

- :mod:`revocation_store`:
    Defines :class:`~.RevocationStore`: TTL key/value contract used for
    logout revocation and refresh markers.

- :mod:`principal_resolver`:
    Defines :class:`~.PrincipalResolver` and :class:`~.Principal`, for
    loading of the authenticated user and its authorities.

Design Notes
------------
All these ports follow *Dependency Inversion Principle (DIP)* to keep
the service layer independent from implementation details.
Concrete adapters (e.g., PyJWT, Redis) implement these interfaces under
``lifolio.infra``; the ``InMemory*`` doubles live next to their port.
"""

from __future__ import annotations

from .principal_resolver import InMemoryPrincipalResolver, Principal, PrincipalResolver
from .revocation_store import InMemoryRevocationStore, RevocationStore
from .token_codec import Claims, DecodeError, DecodeFailure, TokenCodec, TokenKind

__all__ = [
    "Claims",
    "DecodeError",
    "DecodeFailure",
    "InMemoryPrincipalResolver",
    "InMemoryRevocationStore",
    "Principal",
    "PrincipalResolver",
    "RevocationStore",
    "TokenCodec",
    "TokenKind",
]
