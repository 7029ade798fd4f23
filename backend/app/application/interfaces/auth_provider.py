"""Abstract interface (port) for the authentication collaborator."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from app.domain.entities import Session

SessionListener = Callable[[Session | None], None]


class AuthProvider(ABC):
    """Port for sign-in/sign-up and session tracking."""

    @abstractmethod
    async def get_session(self) -> Session | None:
        """Return the current session, or None when signed out."""
        ...

    @abstractmethod
    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener called with the new session on every change.

        Returns a callable that unsubscribes the listener.
        """
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Session:
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Session | None:
        """Create an account. Returns None when email confirmation is pending."""
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...
