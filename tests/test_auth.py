from api.routes import auth as auth_routes
from core.rate_limit import RateLimiter, register_limiter
from models.user import UserModel
from utils import user_manager as user_manager_module

from conftest import DEFAULT_PASSWORD


def register_body(email="new@example.com", **overrides):
    body = {
        "name": "New User",
        "email": email,
        "password": "Passw0rd!",
        "confirmPassword": "Passw0rd!",
        "school": "Hanbit High",
        "role": "student",
    }
    body.update(overrides)
    return body


def test_register_creates_verified_user(client, db):
    response = client.post("/api/auth/register", json=register_body())

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "new@example.com"
    user = db.query(UserModel).filter_by(email="new@example.com").one()
    assert user.role == "student"
    assert user.email_verified is not None
    assert user.password_hash != "Passw0rd!"


def test_register_normalizes_email(client, db):
    response = client.post("/api/auth/register", json=register_body(email="Mixed@Example.com"))

    assert response.status_code == 201
    assert db.query(UserModel).filter_by(email="mixed@example.com").count() == 1


def test_register_duplicate_email_is_rejected_without_write(client, db, make_user):
    make_user(email="taken@example.com")

    response = client.post("/api/auth/register", json=register_body(email="taken@example.com"))

    assert response.status_code == 400
    assert "error" in response.json()
    assert db.query(UserModel).filter_by(email="taken@example.com").count() == 1


def test_register_validation_errors(client):
    response = client.post(
        "/api/auth/register",
        json=register_body(confirmPassword="Different1"),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"
    assert response.json()["details"]

    weak = client.post(
        "/api/auth/register",
        json=register_body(email="weak@example.com", password="lowercase1", confirmPassword="lowercase1"),
    )
    assert weak.status_code == 400

    admin_role = client.post(
        "/api/auth/register",
        json=register_body(email="boss@example.com", role="admin"),
    )
    assert admin_role.status_code == 400


def test_register_rate_limited_after_five_attempts(client):
    for i in range(5):
        response = client.post("/api/auth/register", json=register_body(email=f"user{i}@example.com"))
        assert response.status_code == 201

    response = client.post("/api/auth/register", json=register_body(email="user5@example.com"))

    assert response.status_code == 429
    assert "Retry-After" in response.headers


def test_register_rate_limit_window_resets(client, monkeypatch):
    now = [1_000.0]
    monkeypatch.setattr(register_limiter, "clock", lambda: now[0])

    for i in range(5):
        client.post("/api/auth/register", json=register_body(email=f"user{i}@example.com"))
    assert client.post("/api/auth/register", json=register_body(email="late@example.com")).status_code == 429

    now[0] += 15 * 60 + 1
    response = client.post("/api/auth/register", json=register_body(email="late@example.com"))

    assert response.status_code == 201


def test_rate_limiter_forgets_expired_clients():
    now = [1_000.0]
    limiter = RateLimiter(limit=2, window_seconds=60, clock=lambda: now[0])
    limiter.check("10.0.0.1")
    limiter.check("10.0.0.2")

    now[0] += 61
    limiter.check("10.0.0.3")

    assert set(limiter._records) == {"10.0.0.3"}


def test_rate_limit_is_per_client_ip(client):
    for i in range(5):
        client.post(
            "/api/auth/register",
            json=register_body(email=f"a{i}@example.com"),
            headers={"x-forwarded-for": "10.0.0.1, 172.16.0.1"},
        )

    blocked = client.post(
        "/api/auth/register",
        json=register_body(email="a5@example.com"),
        headers={"x-forwarded-for": "10.0.0.1"},
    )
    other = client.post(
        "/api/auth/register",
        json=register_body(email="b0@example.com"),
        headers={"x-real-ip": "10.0.0.2"},
    )

    assert blocked.status_code == 429
    assert other.status_code == 201


def test_login_returns_token_and_cookie(client, make_user):
    user = make_user(email="login@example.com")

    response = client.post(
        "/api/auth/login",
        json={"email": "login@example.com", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == user.id
    assert data["expiresIn"] == 30 * 24 * 60 * 60
    assert "session_token" in response.cookies

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "login@example.com"


def test_login_rejects_bad_credentials_generically(client, make_user):
    make_user(email="login@example.com")

    wrong_password = client.post(
        "/api/auth/login",
        json={"email": "login@example.com", "password": "Wrong1234"},
    )
    unknown_user = client.post(
        "/api/auth/login",
        json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD},
    )

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_me_requires_session(client):
    assert client.get("/api/auth/me").status_code == 401
    invalid = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert invalid.status_code == 401


def test_logout_clears_cookie(client):
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert "session_token" in response.headers.get("set-cookie", "")


def test_email_verification_flow(client, db, monkeypatch):
    monkeypatch.setattr(user_manager_module, "ENABLE_EMAIL_VERIFICATION", True)
    monkeypatch.setattr(auth_routes, "ENABLE_EMAIL_VERIFICATION", True)

    assert client.post("/api/auth/register", json=register_body()).status_code == 201
    user = db.query(UserModel).filter_by(email="new@example.com").one()
    assert user.email_verified is None
    token = user.verification_token
    assert token

    credentials = {"email": "new@example.com", "password": "Passw0rd!"}
    assert client.post("/api/auth/login", json=credentials).status_code == 403

    assert client.post("/api/auth/verify-email", json={"token": "bogus"}).status_code == 400
    assert client.post("/api/auth/verify-email", json={"token": token}).status_code == 200
    assert client.post("/api/auth/login", json=credentials).status_code == 200


def test_password_reset_flow(client, db, make_user):
    make_user(email="forgot@example.com")

    unknown = client.post("/api/auth/reset-password/request", json={"email": "ghost@example.com"})
    known = client.post("/api/auth/reset-password/request", json={"email": "forgot@example.com"})
    assert unknown.status_code == 200
    assert known.status_code == 200
    assert unknown.json() == known.json()

    db.expire_all()
    token = db.query(UserModel).filter_by(email="forgot@example.com").one().reset_token
    body = {"token": token, "password": "NewPassw0rd", "confirmPassword": "NewPassw0rd"}
    assert client.post("/api/auth/reset-password/confirm", json=body).status_code == 200

    # Tokens are single use
    assert client.post("/api/auth/reset-password/confirm", json=body).status_code == 400

    login = client.post(
        "/api/auth/login",
        json={"email": "forgot@example.com", "password": "NewPassw0rd"},
    )
    assert login.status_code == 200


def test_password_reset_request_rate_limited(client):
    for _ in range(3):
        response = client.post("/api/auth/reset-password/request", json={"email": "x@example.com"})
        assert response.status_code == 200

    response = client.post("/api/auth/reset-password/request", json={"email": "x@example.com"})

    assert response.status_code == 429
