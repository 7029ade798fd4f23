from .auth_provider import AuthProvider, SessionListener
from .record_store import RecordStore

__all__ = [
    "AuthProvider",
    "SessionListener",
    "RecordStore",
]
