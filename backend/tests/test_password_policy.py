from app.core import config as app_config
from app.core.password_policy import evaluate_password


def test_evaluate_password_reports_each_violation():
    assert evaluate_password("Str0ngPassword") == []
    assert evaluate_password("short1A") == ["min_length"]
    assert evaluate_password("alllowercase1") == ["uppercase"]
    assert evaluate_password("ALLUPPERCASE1") == ["lowercase"]
    assert evaluate_password("NoDigitsHere") == ["number"]


def test_min_length_follows_settings():
    app_config.settings.PASSWORD_MIN_LENGTH = 14
    assert "min_length" in evaluate_password("Str0ngPassword"[:-1])
    assert evaluate_password("Str0ngPassword") == []


def test_register_rejects_weak_password(anon_client):
    res = anon_client.post(
        "/api/auth/register",
        json={
            "email": "weak@example.com",
            "password": "password",
            "firstName": "Weak",
            "lastName": "User",
        },
    )
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    codes = {e["code"] for e in body["errors"]}
    assert {"uppercase", "number"} <= codes
    assert all(e["field"] == "password" for e in body["errors"])


def test_login_allows_existing_user_with_fixture_password(anon_client, users):
    res = anon_client.post(
        "/api/auth/login",
        json={"email": "test@example.com", "password": "Test_password_123"},
    )
    assert res.status_code == 200
    assert isinstance(res.json()["data"]["token"], str)
