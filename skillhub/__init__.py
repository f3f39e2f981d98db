from .client import SkillHubClient, create_client
from .errors import ApiError, NotFoundError, UnauthorizedError
from .navigation import LoggingNavigator, Navigator, RedirectNavigator
from .session import FileSessionStore, MemorySessionStore, SessionStore

__all__ = [
    "SkillHubClient",
    "create_client",
    "ApiError",
    "NotFoundError",
    "UnauthorizedError",
    "Navigator",
    "LoggingNavigator",
    "RedirectNavigator",
    "SessionStore",
    "MemorySessionStore",
    "FileSessionStore",
]
