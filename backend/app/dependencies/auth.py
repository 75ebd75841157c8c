# app/dependencies/auth.py
from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.identity import Identity
from app.core.errors import UnauthenticatedError
from app.core.security import InvalidOrExpiredToken, verify_access_token
from app.services.auth_cookie import read_auth_cookie

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    """
    Cookie takes precedence over the Authorization header.
    """
    token = read_auth_cookie(request)
    if token:
        return token
    if creds and creds.scheme.lower() == "bearer" and creds.credentials:
        return creds.credentials.strip() or None
    return None


def get_current_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """
    Validates:
      - token present in the auth cookie or Authorization: Bearer <token>
      - token signature + exp + purpose
    Returns:
      - Identity carrying {user_id, email}
    """
    token = extract_token(request, creds)
    if not token:
        raise UnauthenticatedError("Authentication required")

    try:
        payload = verify_access_token(token)
    except InvalidOrExpiredToken:
        raise UnauthenticatedError("Invalid or expired token")

    identity = Identity.from_token(payload)
    request.state.identity = identity
    return identity


def get_optional_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """
    Same token sources as get_current_identity, but never rejects: any token
    problem yields an unauthenticated Identity.
    """
    token = extract_token(request, creds)
    if not token:
        return Identity.unauthenticated()

    try:
        payload = verify_access_token(token)
    except InvalidOrExpiredToken:
        logger.debug("Ignoring invalid token on optional-auth route %s", request.url.path)
        return Identity.unauthenticated()

    identity = Identity.from_token(payload)
    request.state.identity = identity
    return identity
