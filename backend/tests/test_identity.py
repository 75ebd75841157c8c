# tests/test_identity.py
"""
Unit tests for the Identity model and token extraction.

Tests do NOT require database access.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from app.auth.identity import Identity
from app.core.security import TokenPayload
from app.dependencies.auth import extract_token


# ---------------------------------------------------------------------------
# Tests: Identity
# ---------------------------------------------------------------------------


def test_unauthenticated_identity():
    identity = Identity.unauthenticated()

    assert identity.user_id is None
    assert identity.email is None
    assert identity.is_authenticated is False


def test_identity_from_token_payload():
    identity = Identity.from_token(TokenPayload(user_id="user-1", email="a@example.com"))

    assert identity.user_id == "user-1"
    assert identity.email == "a@example.com"
    assert identity.is_authenticated is True


def test_identity_is_frozen():
    """Identity dataclass should be immutable."""
    identity = Identity.from_token(TokenPayload(user_id="user-1", email="a@example.com"))

    with pytest.raises(Exception):
        identity.user_id = "changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Tests: extract_token
# ---------------------------------------------------------------------------


def _request(cookies: dict | None = None):
    request = MagicMock()
    request.cookies = cookies or {}
    return request


def test_extract_token_prefers_cookie():
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="from-header")
    assert extract_token(_request({"token": "from-cookie"}), creds) == "from-cookie"


def test_extract_token_falls_back_to_bearer():
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="from-header")
    assert extract_token(_request(), creds) == "from-header"


def test_extract_token_ignores_blank_values():
    assert extract_token(_request({"token": "   "}), None) is None
    creds = HTTPAuthorizationCredentials(scheme="Basic", credentials="abc")
    assert extract_token(_request(), creds) is None
