from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller handed to downstream business logic.

    :ivar user_id: Identifier taken from the accepted access token.
    :ivar username: Display/login name of the user.
    :ivar authorities: Granted authorities (e.g. ``"ROLE_USER"``).
    """

    user_id: int
    username: str
    authorities: tuple[str, ...] = field(default_factory=tuple)


class PrincipalResolver(Protocol):
    """
    Port that loads a user and its authorities from an accepted user id.

    Returns ``None`` when the user no longer exists.
    """

    def resolve(self, user_id: int) -> Principal | None: ...


class InMemoryPrincipalResolver(PrincipalResolver):
    """Dictionary-backed resolver used in unit tests and local development."""

    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        self._by_id: dict[int, Principal] = {p.user_id: p for p in principals}

    def register(
        self, user_id: int, username: str, authorities: Iterable[str] = ("ROLE_USER",)
    ) -> Principal:
        principal = Principal(user_id=user_id, username=username, authorities=tuple(authorities))
        self._by_id[user_id] = principal
        return principal

    def resolve(self, user_id: int) -> Principal | None:
        return self._by_id.get(user_id)
