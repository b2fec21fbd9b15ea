from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient

from app.api.v1.endpoints.auth import SESSION_COOKIE, STATE_COOKIE
from app.config import settings
from app.core.security import create_access_token, decode_access_token
from app.schemas.user import SessionUser


@pytest.fixture
def oauth_configured(monkeypatch):
    monkeypatch.setattr(settings, "GITHUB_CLIENT_ID", "client-id")
    monkeypatch.setattr(settings, "GITHUB_CLIENT_SECRET", "client-secret")


@pytest.fixture
def oauth_missing(monkeypatch):
    monkeypatch.setattr(settings, "GITHUB_CLIENT_ID", "")
    monkeypatch.setattr(settings, "GITHUB_CLIENT_SECRET", "")


def test_token_roundtrip():
    token = create_access_token(
        SessionUser(user_id="4242", username="octocat", avatar_url="https://a/b")
    )

    payload = decode_access_token(token)

    assert payload.sub == "4242"
    assert payload.username == "octocat"
    assert payload.avatar_url == "https://a/b"


def test_decode_garbage_token():
    assert decode_access_token("not.a.token") is None


@pytest.mark.asyncio
async def test_me_requires_session(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


@pytest.mark.asyncio
async def test_me_with_bearer_token(client: AsyncClient, alice: dict):
    response = await client.get("/api/v1/auth/me", headers=alice)

    assert response.status_code == 200
    assert response.json()["user"] == {"user_id": "1001", "username": "alice", "avatar_url": None}


@pytest.mark.asyncio
async def test_me_with_session_cookie(client: AsyncClient):
    client.cookies.set(SESSION_COOKIE, create_access_token(SessionUser(user_id="7", username="dana")))

    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 200
    assert response.json()["user"]["username"] == "dana"


@pytest.mark.asyncio
async def test_session_token(client: AsyncClient, alice: dict):
    response = await client.post("/api/v1/auth/token", headers=alice)

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"]).sub == "1001"


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    response = await client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert SESSION_COOKIE in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_github_login_not_configured(client: AsyncClient, oauth_missing):
    response = await client.get("/api/v1/auth/github")

    assert response.status_code == 503
    assert response.json()["code"] == "SERVER_UNAVAILABLE"


@pytest.mark.asyncio
async def test_github_login_redirects(client: AsyncClient, oauth_configured):
    response = await client.get("/api/v1/auth/github")

    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    query = parse_qs(location.query)
    assert location.netloc == "github.com"
    assert query["client_id"] == ["client-id"]
    assert query["redirect_uri"] == [f"{settings.BACKEND_URL}/api/v1/auth/github/callback"]
    assert response.cookies.get(STATE_COOKIE) == query["state"][0]


@pytest.mark.asyncio
async def test_github_callback_success(client: AsyncClient, fake_github, oauth_configured):
    client.cookies.set(STATE_COOKIE, "state-123")

    response = await client.get(
        "/api/v1/auth/github/callback", params={"code": "abc", "state": "state-123"}
    )

    assert response.status_code == 307
    assert response.headers["location"] == f"{settings.FRONTEND_URL}/pvp?auth=success"
    assert fake_github.oauth_codes == ["abc"]
    session = decode_access_token(response.cookies.get(SESSION_COOKIE))
    assert session.sub == "4242"
    assert session.username == "octocat"


@pytest.mark.asyncio
async def test_github_callback_state_mismatch(client: AsyncClient, fake_github, oauth_configured):
    client.cookies.set(STATE_COOKIE, "state-123")

    response = await client.get(
        "/api/v1/auth/github/callback", params={"code": "abc", "state": "forged"}
    )

    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert parse_qs(location.query)["auth"] == ["error"]
    assert fake_github.oauth_codes == []
    assert response.cookies.get(SESSION_COOKIE) is None
