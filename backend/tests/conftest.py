"""
Shared fixtures: an in-memory SQLite database behind the FastAPI app
"""
import os

# Must be set before the settings module is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAILS"] = '["admin@example.com"]'
os.environ["SMTP_HOST"] = ""
os.environ["ELEVEN_LABS_API_KEY"] = "test-eleven-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from progress_chat.main import app
from progress_chat.models.base import Base, get_db
from progress_chat.api.routes import chat as chat_routes


class FakeGeneration:
    """Records generation calls and answers deterministically"""

    def __init__(self, title="Test Title"):
        self.title = title
        self.calls = []
        self.title_calls = []

    async def generate_response(self, message, profile=None, history=None, attachment_data_uri=None, mode="standard"):
        self.calls.append({
            "message": message,
            "profile": profile,
            "history": history,
            "attachment_data_uri": attachment_data_uri,
            "mode": mode,
        })
        return f"Reply {len(self.calls)} to: {message}"

    async def summarize_title(self, message):
        self.title_calls.append(message)
        return self.title


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def engine():
    return create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def client(engine, session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        test_client.portal.call(_create_tables, engine)
        yield test_client
        test_client.portal.call(engine.dispose)
    app.dependency_overrides.clear()


@pytest.fixture
def run_db(client, session_factory):
    """Run `fn(session)` on the app's event loop and return its result"""
    def runner(fn):
        async def wrapper():
            async with session_factory() as session:
                return await fn(session)
        return client.portal.call(wrapper)
    return runner


@pytest.fixture
def fake_generation(monkeypatch):
    fake = FakeGeneration()
    monkeypatch.setattr(chat_routes.chat_service, "generation", fake)
    return fake


def signup(client, email="ada@example.com", password="secret-pass", **overrides):
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": email,
        "password": password,
        "age": 28,
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/signup", json=payload)


def auth_headers(client, email="ada@example.com", **overrides):
    response = signup(client, email=email, **overrides)
    assert response.status_code == 201, response.text
    # Each test talks through one client, so drop the cookie and rely on the header
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def user_headers(client):
    return auth_headers(client)


@pytest.fixture
def admin_headers(client):
    return auth_headers(client, email="admin@example.com", first_name="Grace")
