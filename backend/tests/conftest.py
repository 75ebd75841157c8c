import os

# Ensure JWT_SECRET exists before importing app.main (it calls require_jwt_secret() at import time).
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
# Keep the module-level engine off PostgreSQL; tests bind their own session anyway.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("OPENAI_API_KEY", "")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import importlib

from app.auth.identity import Identity
from app.core.base import Base
from app.core import config as app_config
from app.core.rate_limit import limiter
from app.core.security import hash_password

# Import models so they register with SQLAlchemy metadata.
from app.models.user import User  # noqa: F401
from app.models.job import Job  # noqa: F401
from app.models.cv import CV  # noqa: F401
from app.models.application import Application  # noqa: F401
from app.models.cover_letter import CoverLetter  # noqa: F401

from app.core.database import get_db
from app.core.errors import AIGenerationFailed
from app.dependencies.auth import get_current_identity
from app.services.ai_drafting import get_cover_letter_drafter

TEST_PASSWORD = "Test_password_123"


class StubDrafter:
    """
    Deterministic stand-in for the AI collaborator. Records every call.
    """

    def __init__(self):
        self.configured = True
        self.fail = False
        self.generate_calls = []
        self.refine_calls = []
        self.generated_text = "Sehr geehrte Damen und Herren,\n\nhiermit bewerbe ich mich."
        self.refined_text = "Sehr geehrte Damen und Herren,\n\nverbesserte Fassung."

    @property
    def is_configured(self) -> bool:
        return self.configured

    def generate_cover_letter(self, facts):
        self.generate_calls.append(facts)
        if self.fail:
            raise AIGenerationFailed()
        return self.generated_text

    def refine_cover_letter(self, text, instructions):
        self.refine_calls.append((text, instructions))
        if self.fail:
            raise AIGenerationFailed("Failed to refine cover letter. Please try again.")
        return self.refined_text


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "PASSWORD_MIN_LENGTH",
        "OPENAI_API_KEY",
        "JWT_EXPIRES_DAYS",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)
        # Rate limiting stays off unless a test switches the limiter on itself.
        limiter.enabled = False
        limiter.reset()


@pytest.fixture()
def drafter():
    return StubDrafter()


@pytest.fixture()
def app(db_session, drafter):
    # Ensure settings has a JWT secret even if imported earlier.
    app_config.settings.JWT_SECRET = app_config.settings.JWT_SECRET or "test_jwt_secret"
    limiter.enabled = False

    import app.main as main

    importlib.reload(main)
    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_cover_letter_drafter] = lambda: drafter
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


def _make_user(db_session, email, first_name, last_name):
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def users(db_session):
    """
    Two distinct users for ownership / isolation tests.
    """
    user_a = _make_user(db_session, "test@example.com", "Test", "User")
    user_b = _make_user(db_session, "other@example.com", "Other", "User")
    return user_a, user_b


def identity_for(user: User) -> Identity:
    return Identity(user_id=user.id, email=user.email, is_authenticated=True)


@pytest.fixture()
def client(app, users):
    """
    Default client authenticated as user_a.
    """
    user_a, _ = users
    app.dependency_overrides[get_current_identity] = lambda: identity_for(user_a)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_current_identity, None)


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary user.

    Usage:
        with client_for(user) as c:
            ...
    """

    @contextmanager
    def _client_for(user: User):
        app.dependency_overrides[get_current_identity] = lambda: identity_for(user)
        with TestClient(app) as c:
            yield c
        app.dependency_overrides.pop(get_current_identity, None)

    return _client_for


@pytest.fixture()
def anon_client(app):
    """
    Client without any auth override: real cookie / Bearer handling.
    """
    with TestClient(app) as c:
        yield c
