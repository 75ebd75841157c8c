from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.core import config as app_config
from app.core.security import create_access_token
from app.models.user import User

API = "/api"

REGISTER_BODY = {
    "email": "a@x.com",
    "password": "Str0ngPassword",
    "firstName": "Ada",
    "lastName": "Lovelace",
}


def _register(c, **overrides):
    body = {**REGISTER_BODY, **overrides}
    return c.post(f"{API}/auth/register", json=body)


def test_register_returns_user_token_and_sets_cookie(anon_client, db_session):
    res = _register(anon_client)
    assert res.status_code == 201

    body = res.json()
    assert body["success"] is True
    data = body["data"]
    assert data["user"]["email"] == "a@x.com"
    assert data["user"]["firstName"] == "Ada"
    assert "passwordHash" not in data["user"]
    assert isinstance(data["token"], str) and data["token"]

    set_cookie = res.headers.get("set-cookie", "")
    assert "token=" in set_cookie
    assert "httponly" in set_cookie.lower()
    assert "samesite=strict" in set_cookie.lower()

    user = db_session.query(User).filter(User.email == "a@x.com").first()
    assert user is not None
    assert user.password_hash != "Str0ngPassword"


def test_register_duplicate_email_is_conflict(anon_client):
    assert _register(anon_client).status_code == 201
    res = _register(anon_client)
    assert res.status_code == 409
    assert res.json() == {"success": False, "message": "User with this email already exists"}


def test_email_uniqueness_is_case_sensitive(anon_client):
    assert _register(anon_client).status_code == 201
    assert _register(anon_client, email="A@x.com").status_code == 201


def test_register_stores_email_as_submitted(anon_client, db_session):
    res = _register(anon_client, email="  Bob@Example.COM ")
    assert res.status_code == 201
    assert res.json()["data"]["user"]["email"] == "Bob@Example.COM"
    assert db_session.query(User).filter(User.email == "Bob@Example.COM").count() == 1

    # Differs only in domain case: a different account.
    assert _register(anon_client, email="Bob@example.com").status_code == 201

    login = anon_client.post(f"{API}/auth/login", json={"email": "Bob@Example.COM", "password": "Str0ngPassword"})
    assert login.status_code == 200


def test_register_rejects_malformed_email(anon_client):
    res = _register(anon_client, email="not-an-email")
    assert res.status_code == 400
    assert res.json()["errors"][0] == {"field": "email", "message": "Invalid email address"}


def test_login_sets_cookie_and_me_works_with_cookie(anon_client):
    _register(anon_client)
    anon_client.cookies.clear()

    res = anon_client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "Str0ngPassword"})
    assert res.status_code == 200
    assert res.json()["data"]["user"]["email"] == "a@x.com"
    assert anon_client.cookies.get("token")

    me = anon_client.get(f"{API}/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "a@x.com"
    assert me.json()["data"]["lastName"] == "Lovelace"


def test_login_failures_are_indistinguishable(anon_client):
    _register(anon_client)

    wrong_pw = anon_client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "nope"})
    unknown = anon_client.post(f"{API}/auth/login", json={"email": "b@x.com", "password": "Str0ngPassword"})

    assert wrong_pw.status_code == 401
    assert unknown.status_code == 401
    assert wrong_pw.json() == unknown.json()
    assert wrong_pw.json()["message"] == "Invalid email or password"


def test_logout_clears_cookie(anon_client):
    _register(anon_client)
    assert anon_client.cookies.get("token")

    res = anon_client.post(f"{API}/auth/logout")
    assert res.status_code == 200
    assert not anon_client.cookies.get("token")
    assert anon_client.get(f"{API}/auth/me").status_code == 401


def test_bearer_header_authenticates(anon_client):
    token = _register(anon_client).json()["data"]["token"]
    anon_client.cookies.clear()

    res = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["data"]["email"] == "a@x.com"


def test_cookie_takes_precedence_over_bearer(anon_client, users):
    user_a, user_b = users
    cookie_token = create_access_token(user_a.id, user_a.email)
    header_token = create_access_token(user_b.id, user_b.email)

    anon_client.cookies.set("token", cookie_token)
    res = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {header_token}"})
    assert res.status_code == 200
    assert res.json()["data"]["email"] == user_a.email


def test_missing_token_is_unauthenticated(anon_client):
    res = anon_client.get(f"{API}/jobs/")
    assert res.status_code == 401
    assert res.json()["message"] == "Authentication required"


def test_expired_token_is_rejected(anon_client, users):
    user_a, _ = users
    past = datetime.now(timezone.utc) - timedelta(days=1)
    expired = jwt.encode(
        {
            "sub": user_a.id,
            "email": user_a.email,
            "purpose": "access",
            "iat": int((past - timedelta(days=7)).timestamp()),
            "exp": int(past.timestamp()),
        },
        app_config.settings.JWT_SECRET,
        algorithm=app_config.settings.JWT_ALGORITHM,
    )
    res = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid or expired token"


def test_tampered_token_is_rejected(anon_client, users):
    user_a, _ = users
    token = create_access_token(user_a.id, user_a.email)
    res = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token[:-2]}xx"})
    assert res.status_code == 401


def test_me_for_deleted_user_is_not_found(anon_client, users, db_session):
    user_a, _ = users
    token = create_access_token(user_a.id, user_a.email)
    db_session.delete(user_a)
    db_session.commit()

    res = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 404
    assert res.json()["message"] == "User not found"


def test_end_to_end_register_job_application_status_statistics(anon_client):
    _register(anon_client)

    job = anon_client.post(f"{API}/jobs/", json={"companyName": "Acme", "positionTitle": "Eng"})
    assert job.status_code == 201
    job_id = job.json()["data"]["id"]

    app_res = anon_client.post(f"{API}/applications/", json={"jobId": job_id})
    assert app_res.status_code == 201
    application = app_res.json()["data"]
    assert application["status"] == "TO_APPLY"

    patched = anon_client.patch(
        f"{API}/applications/{application['id']}/status", json={"status": "INTERVIEW"}
    )
    assert patched.status_code == 200
    assert patched.json()["data"]["status"] == "INTERVIEW"

    stats = anon_client.get(f"{API}/applications/statistics").json()["data"]
    assert stats["total"] == 1
    assert stats["byStatus"]["interview"] == 1
    assert stats["interviewRate"] == "100.00"
    assert stats["successRate"] == "0.00"
