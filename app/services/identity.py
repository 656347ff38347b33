"""
Identity Provider

The token service only needs an object with a ``username``. This module
defines that object and a minimal provider that resolves usernames to
identities when a bearer token is presented.

The bundled StaticIdentityProvider reads its users from the KNOWN_USERS
setting. Deployments backed by a real user store override the
get_identity_provider dependency instead.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class Identity:
    """An authenticated principal, e.g. a phone number or username."""
    username: str


class IdentityProvider(ABC):
    """Resolves a username (the token subject) to an Identity."""

    @abstractmethod
    def load(self, username: str) -> Optional[Identity]:
        """Return the identity for ``username``, or None if unknown."""


class StaticIdentityProvider(IdentityProvider):
    """Identity provider backed by a fixed set of usernames."""

    def __init__(self, usernames: Iterable[str]):
        self._usernames = frozenset(u for u in usernames if u)

    def load(self, username: str) -> Optional[Identity]:
        if username in self._usernames:
            return Identity(username=username)
        return None
