from __future__ import annotations

import pytest
from fastapi import FastAPI, Depends
from fastapi.testclient import TestClient

from app.auth.identity import Identity
from app.core import config as app_config
from app.core.security import (
    InvalidOrExpiredToken,
    create_access_token,
    hash_password,
    token_max_age_seconds,
    verify_access_token,
    verify_password,
)
from app.dependencies.auth import get_optional_identity


def test_hash_is_salted_and_verifies():
    h1 = hash_password("Secret123")
    h2 = hash_password("Secret123")
    assert h1 != h2
    assert h1 != "Secret123"
    assert verify_password("Secret123", h1)
    assert not verify_password("Secret124", h1)


def test_verify_password_treats_garbage_hash_as_mismatch():
    assert verify_password("Secret123", "not-a-hash") is False


def test_token_round_trip_carries_user_id_and_email():
    token = create_access_token("user-1", "a@x.com")
    payload = verify_access_token(token)
    assert payload.user_id == "user-1"
    assert payload.email == "a@x.com"


def test_token_lifetime_defaults_to_seven_days():
    assert token_max_age_seconds() == 7 * 24 * 3600


@pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
def test_malformed_tokens_raise(token):
    with pytest.raises(InvalidOrExpiredToken):
        verify_access_token(token)


def test_token_signed_with_other_secret_is_rejected(monkeypatch):
    token = create_access_token("user-1", "a@x.com")
    monkeypatch.setattr(app_config.settings, "JWT_SECRET", "another-secret")
    with pytest.raises(InvalidOrExpiredToken):
        verify_access_token(token)


def test_expired_token_is_rejected():
    app_config.settings.JWT_EXPIRES_DAYS = -1
    token = create_access_token("user-1", "a@x.com")
    with pytest.raises(InvalidOrExpiredToken):
        verify_access_token(token)


def _optional_app() -> FastAPI:
    app = FastAPI()

    @app.get("/whoami")
    def whoami(identity: Identity = Depends(get_optional_identity)):
        return {"authenticated": identity.is_authenticated, "user_id": identity.user_id}

    return app


def test_optional_identity_degrades_on_bad_token():
    with TestClient(_optional_app()) as c:
        res = c.get("/whoami", headers={"Authorization": "Bearer garbage"})
        assert res.status_code == 200
        assert res.json() == {"authenticated": False, "user_id": None}

        res = c.get("/whoami")
        assert res.json() == {"authenticated": False, "user_id": None}


def test_optional_identity_accepts_valid_token():
    token = create_access_token("user-9", "z@x.com")
    with TestClient(_optional_app()) as c:
        res = c.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert res.json() == {"authenticated": True, "user_id": "user-9"}
