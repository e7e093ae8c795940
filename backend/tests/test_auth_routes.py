from sqlalchemy import select

from progress_chat.config.settings import settings
from progress_chat.models.user import User
from progress_chat.services.auth_service import RESET_REQUESTED

from conftest import signup


def test_signup_creates_profile_with_defaults(client):
    response = signup(client, location={"latitude": 6.5244, "longitude": 3.3792})

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    user = body["user"]
    assert user["first_name"] == "Ada"
    assert user["voice"] == settings.DEFAULT_VOICE_ID
    assert user["memory"] == ""
    assert user["voice_mode_enabled"] is False
    assert user["location"] == {"latitude": 6.5244, "longitude": 3.3792}
    assert response.cookies.get("token") == body["token"]


def test_signup_requires_every_non_location_field(client):
    response = client.post("/api/v1/auth/signup", json={
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password": "secret-pass",
    })
    assert response.status_code == 422


def test_signup_rejects_duplicate_email(client):
    assert signup(client).status_code == 201
    response = signup(client, email="ADA@example.com")
    assert response.status_code == 409


def test_login_success_and_generic_failures(client):
    signup(client)
    client.cookies.clear()

    ok = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "secret-pass"})
    assert ok.status_code == 200
    assert ok.json()["user"]["email"] == "ada@example.com"

    wrong_password = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "nope-nope"})
    unknown = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "secret-pass"})
    assert wrong_password.status_code == unknown.status_code == 401
    assert wrong_password.json()["detail"] == unknown.json()["detail"] == "Invalid email or password."


def test_cookie_authenticates_and_logout_clears_it(client):
    signup(client)
    assert client.get("/api/v1/profile").status_code == 200

    client.post("/api/v1/auth/logout")
    client.cookies.clear()
    assert client.get("/api/v1/profile").status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_forgot_password_answers_the_same_for_unknown_accounts(client):
    signup(client)
    known = client.post("/api/v1/auth/forgot-password", json={"email": "ada@example.com"})
    unknown = client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json()["message"] == unknown.json()["message"] == RESET_REQUESTED


def test_reset_password_flow(client, run_db):
    signup(client)
    client.cookies.clear()
    client.post("/api/v1/auth/forgot-password", json={"email": "ada@example.com"})

    async def read_token(session):
        result = await session.execute(select(User.reset_token).where(User.email == "ada@example.com"))
        return result.scalar_one()

    token = run_db(read_token)
    assert token

    response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "brand-new-pass"})
    assert response.status_code == 200

    # Tokens are single use
    again = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "another-pass"})
    assert again.status_code == 400

    login = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "brand-new-pass"})
    assert login.status_code == 200


def test_reset_password_rejects_unknown_token(client):
    response = client.post("/api/v1/auth/reset-password", json={"token": "bogus", "new_password": "brand-new-pass"})
    assert response.status_code == 400
