# app/core/security.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class InvalidOrExpiredToken(ValueError):
    pass


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    email: str


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    # Malformed/unknown hashes count as a mismatch rather than a server error.
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False


# -------------------------
# JWT helpers
# -------------------------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _require_jwt_secret() -> None:
    # Auth is always on -> JWT_SECRET must always exist
    if not settings.JWT_SECRET or not settings.JWT_SECRET.strip():
        raise RuntimeError("JWT_SECRET must be set (auth is required).")


def token_max_age_seconds() -> int:
    return int(settings.JWT_EXPIRES_DAYS) * 24 * 3600


def create_access_token(user_id: str, email: str) -> str:
    """
    Session token carried in the auth cookie or `Authorization: Bearer <token>`.
    """
    _require_jwt_secret()

    now = _now_utc()
    exp = now + timedelta(seconds=token_max_age_seconds())

    payload = {
        "sub": str(user_id),
        "email": email,
        "purpose": "access",
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    _require_jwt_secret()
    # Let callers decide how to handle JWTError
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def verify_access_token(token: str) -> TokenPayload:
    """
    Returns the `{user_id, email}` carried by a valid access token.
    Bad signature, malformed token, expiry and wrong purpose all raise
    InvalidOrExpiredToken.
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise InvalidOrExpiredToken("Invalid or expired token")

    if payload.get("purpose") != "access":
        raise InvalidOrExpiredToken("Invalid or expired token")

    user_id = str(payload.get("sub") or "").strip()
    email = str(payload.get("email") or "").strip()
    if not user_id or not email:
        raise InvalidOrExpiredToken("Invalid or expired token")

    return TokenPayload(user_id=user_id, email=email)
