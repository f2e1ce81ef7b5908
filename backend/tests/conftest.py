"""Shared fixtures: in-memory SQLite, fakeredis and a LinkedIn mock."""
import os

# Settings are read on first use; configure before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LINKEDIN_CLIENT_ID", "test-client-id")
os.environ.setdefault("LINKEDIN_CLIENT_SECRET", "test-client-secret")
os.environ["HUGGINGFACE_API_KEY"] = ""

from typing import Any, Dict, Optional  # noqa: E402
from urllib.parse import parse_qs, urlparse  # noqa: E402

import fakeredis  # noqa: E402
import fakeredis.aioredis  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.auth.session import get_redis  # noqa: E402
from app.config import get_settings  # noqa: E402
from app.database import Base, get_engine, get_sessionmaker  # noqa: E402
from app.dependencies import get_linkedin_client, get_thumbnail_renderer  # noqa: E402
from app.main import app  # noqa: E402
from app.services.linkedin import LinkedInClient  # noqa: E402
from app.services.thumbnail import ThumbnailRenderer  # noqa: E402

FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"


class FakeRenderer(ThumbnailRenderer):
    """Keeps the concurrency cap but skips launching a browser."""

    def __init__(self, settings, fail: bool = False):
        super().__init__(settings)
        self.fail = fail
        self.captured = []

    async def _capture(self, html: str) -> bytes:
        from app.utils.exceptions import RenderFailedError

        if self.fail:
            raise RenderFailedError("browser failed to launch")
        self.captured.append(html)
        return FAKE_JPEG


def linkedin_transport(profile: Optional[Dict[str, Any]] = None, expires_in: int = 3600) -> httpx.MockTransport:
    """MockTransport answering LinkedIn's token and userinfo endpoints."""
    profile = profile if profile is not None else {
        "sub": "li-ada",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "picture": "https://media.example.com/ada.jpg",
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/v2/accessToken":
            form = parse_qs(request.content.decode())
            return httpx.Response(200, json={
                "access_token": f"token-{form['code'][0]}",
                "expires_in": expires_in,
            })
        if request.url.path == "/v2/userinfo":
            if request.headers.get("Authorization", "").startswith("Bearer token-"):
                return httpx.Response(200, json=profile)
            return httpx.Response(401, json={"message": "invalid token"})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    import app.models  # noqa: F401

    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis():
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def renderer(settings):
    return FakeRenderer(settings)


@pytest.fixture
def provider_transport():
    return linkedin_transport()


@pytest.fixture
def client(settings, fake_redis, renderer, provider_transport):
    async def override_redis():
        yield fake_redis

    app.dependency_overrides[get_redis] = override_redis
    app.dependency_overrides[get_thumbnail_renderer] = lambda: renderer
    app.dependency_overrides[get_linkedin_client] = lambda: LinkedInClient(settings, transport=provider_transport)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def login(client: TestClient, code: str = "abc") -> str:
    """Run the OAuth redirect and callback; returns the callback's redirect target."""
    response = client.get("/auth/linkedin", follow_redirects=False)
    assert response.status_code == 307
    state = parse_qs(urlparse(response.headers["location"]).query)["state"][0]

    response = client.get(
        "/auth/linkedin/callback",
        params={"code": code, "state": state},
        follow_redirects=False,
    )
    assert response.status_code == 307, response.text
    return response.headers["location"]


@pytest.fixture
def logged_in(client):
    login(client)
    return client
