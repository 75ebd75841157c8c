# app/auth/identity.py
"""
Canonical authenticated identity model.

An Identity is built from a verified session token and is what every
owned-resource service receives as "the caller". Services scope every query by
``identity.user_id``; nothing else about the request is trusted for ownership.

The Identity object is INTERNAL ONLY and should not be returned directly
to clients.
"""
from __future__ import annotations

from dataclasses import dataclass

from app.core.security import TokenPayload


@dataclass(frozen=True)
class Identity:
    """
    Canonical representation of an authenticated (or unauthenticated) caller.

    Attributes:
        user_id: Internal user id taken from the token subject.
        email: Email the token was issued for.
        is_authenticated: True if a valid token was presented.
    """

    user_id: str | None = None
    email: str | None = None
    is_authenticated: bool = False

    @classmethod
    def unauthenticated(cls) -> Identity:
        """Create an identity representing an unauthenticated request."""
        return cls(user_id=None, email=None, is_authenticated=False)

    @classmethod
    def from_token(cls, payload: TokenPayload) -> Identity:
        return cls(user_id=payload.user_id, email=payload.email, is_authenticated=True)

