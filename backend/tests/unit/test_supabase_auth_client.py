"""Unit tests for the SupabaseAuthClient GoTrue adapter."""

import httpx
import pytest

from app.domain.exceptions import AuthError
from app.infrastructure.supabase.supabase_auth_client import SupabaseAuthClient


def _token_response(user_id: str = "user-1", email: str = "ana@example.com") -> dict:
    return {
        "access_token": "jwt-abc",
        "token_type": "bearer",
        "expires_in": 3600,
        "refresh_token": "refresh-xyz",
        "user": {"id": user_id, "email": email},
    }


def _make_client(handler) -> SupabaseAuthClient:
    return SupabaseAuthClient(
        base_url="https://demo.supabase.co",
        anon_key="anon-key",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_sign_in_sets_session_and_notifies():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_token_response())

    client = _make_client(handler)
    seen = []
    client.on_session_change(seen.append)

    session = await client.sign_in("ana@example.com", "secret")

    assert requests[0].url.path == "/auth/v1/token"
    assert requests[0].url.params["grant_type"] == "password"
    assert session.user.id == "user-1"
    assert session.refresh_token == "refresh-xyz"
    assert client.access_token == "jwt-abc"
    assert await client.get_session() == session
    assert seen == [session]


@pytest.mark.asyncio
async def test_sign_in_failure_raises_auth_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
        )

    client = _make_client(handler)

    with pytest.raises(AuthError) as exc_info:
        await client.sign_in("ana@example.com", "wrong")

    assert exc_info.value.message == "Invalid login credentials"
    assert exc_info.value.status_code == 400
    assert await client.get_session() is None


@pytest.mark.asyncio
async def test_sign_up_pending_confirmation_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "user-2", "email": "new@example.com"})

    client = _make_client(handler)
    seen = []
    client.on_session_change(seen.append)

    assert await client.sign_up("new@example.com", "secret") is None
    assert seen == []


@pytest.mark.asyncio
async def test_sign_up_with_auto_confirm_signs_in():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/v1/signup"
        return httpx.Response(200, json=_token_response(user_id="user-3"))

    client = _make_client(handler)

    session = await client.sign_up("new@example.com", "secret")

    assert session is not None
    assert client.access_token == "jwt-abc"


@pytest.mark.asyncio
async def test_sign_out_clears_session_even_if_token_expired():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/auth/v1/logout":
            return httpx.Response(401, json={"msg": "JWT expired"})
        return httpx.Response(200, json=_token_response())

    client = _make_client(handler)
    seen = []
    await client.sign_in("ana@example.com", "secret")
    client.on_session_change(seen.append)

    await client.sign_out()

    assert calls[-1].headers["authorization"] == "Bearer jwt-abc"
    assert await client.get_session() is None
    assert seen == [None]


@pytest.mark.asyncio
async def test_unsubscribe_stops_notifications():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_token_response())

    client = _make_client(handler)
    seen = []
    unsubscribe = client.on_session_change(seen.append)
    unsubscribe()

    await client.sign_in("ana@example.com", "secret")

    assert seen == []
