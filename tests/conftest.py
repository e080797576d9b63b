"""Shared fixtures: an in-memory database, an API client and signed-in users."""

import os
import tempfile

# Configuration is read at import time, so it has to be in place first
_TMP_DIR = tempfile.mkdtemp(prefix="schoolhub-test-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATA_DIR"] = os.path.join(_TMP_DIR, "data")
os.environ["UPLOADS_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ENABLE_EMAIL_VERIFICATION"] = "false"

import pytest
from fastapi.testclient import TestClient

from api.routes.auth import create_access_token
from app import app
from core.database import SessionLocal, engine
from core.rate_limit import password_reset_limiter, register_limiter
from models.base import Base
from utils import user_manager as user_manager_module
from utils.user_manager import UserManager

DEFAULT_PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Fresh tables, empty rate limit windows and cheap password hashing."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    register_limiter.reset()
    password_reset_limiter.reset()
    monkeypatch.setattr(user_manager_module, "BCRYPT_ROUNDS", 4)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    """Create a verified user and return it."""

    counter = {"n": 0}

    def factory(role="student", school="Hanbit High", email=None, name=None, password=DEFAULT_PASSWORD):
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        return UserManager(db).create_user(
            email=email,
            password=password,
            name=name or f"{role.title()} {counter['n']}",
            school=school,
            role=role,
        )

    return factory


def auth_headers(user) -> dict:
    token = create_access_token(data={"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def teacher(make_user):
    return make_user(role="teacher")


@pytest.fixture
def student(make_user):
    return make_user(role="student")


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


@pytest.fixture
def superadmin(make_user):
    return make_user(role="superadmin", school=None)


@pytest.fixture
def headers_for():
    """Bearer headers for a user, as issued at sign in."""
    return auth_headers
