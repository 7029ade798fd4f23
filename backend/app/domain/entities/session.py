"""Domain entities for the authenticated session handed out by the auth provider."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str = ""


@dataclass(frozen=True)
class Session:
    """An authenticated session. Its presence gates every store read."""

    access_token: str
    user: AuthUser
    refresh_token: str = ""
    expires_in: int | None = None
