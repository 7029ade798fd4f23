"""Supabase auth client — implements the AuthProvider port over GoTrue.

Endpoints used (relative to ``/auth/v1``):

    POST /token?grant_type=password   sign in
    POST /signup                      create account
    POST /logout                      revoke the current session
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from app.application.interfaces.auth_provider import AuthProvider, SessionListener
from app.domain.entities import AuthUser, Session
from app.domain.exceptions import AuthError

logger = logging.getLogger(__name__)


class SupabaseAuthClient(AuthProvider):
    """Infrastructure adapter — keeps the current session and notifies subscribers.

    The session lives in memory only; every change (sign-in, sign-up with
    auto-confirm, sign-out) is pushed to the registered listeners.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._auth_url = f"{base_url.rstrip('/')}/auth/v1"
        self._anon_key = anon_key
        self._http_client = http_client
        self._timeout = timeout
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    @property
    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    async def get_session(self) -> Session | None:
        return self._session

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in(self, email: str, password: str) -> Session:
        data = await self._post(
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = self._parse_session(data)
        if session is None:
            raise AuthError("Sign-in response carried no session")
        self._set_session(session)
        logger.info("Signed in as %s", session.user.email or session.user.id)
        return session

    async def sign_up(self, email: str, password: str) -> Session | None:
        data = await self._post("/signup", json={"email": email, "password": password})
        session = self._parse_session(data)
        if session is None:
            logger.info("Sign-up for %s pending email confirmation", email)
            return None
        self._set_session(session)
        return session

    async def sign_out(self) -> None:
        """Revoke the session server-side and always drop it locally."""
        token = self.access_token
        if token is None:
            return
        try:
            await self._post("/logout", token=token)
        except AuthError as exc:
            # An expired or already-revoked token still means "signed out".
            if exc.status_code not in (401, 403, 404):
                raise
            logger.debug("Logout returned %s; clearing session anyway", exc.status_code)
        finally:
            self._set_session(None)

    # ── Helpers ──

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _post(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {token or self._anon_key}",
            "Content-Type": "application/json",
        }
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(
                f"{self._auth_url}{path}", headers=headers, params=params, json=json
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            raise AuthError(self._error_message(response), status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        for key in ("error_description", "msg", "message", "error"):
            if isinstance(data, dict) and data.get(key):
                return str(data[key])
        return response.text

    @staticmethod
    def _parse_session(data: dict[str, Any]) -> Session | None:
        """Build a Session from a token response, or None when there is no token."""
        token = data.get("access_token")
        if not token:
            return None
        user = data.get("user") or {}
        return Session(
            access_token=token,
            refresh_token=data.get("refresh_token") or "",
            expires_in=data.get("expires_in"),
            user=AuthUser(id=str(user.get("id") or ""), email=user.get("email") or ""),
        )
