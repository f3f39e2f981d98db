from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Navigator:
    """Moves the user to another route, e.g. the login view."""

    def navigate(self, route: str) -> None:
        raise NotImplementedError


class LoggingNavigator(Navigator):
    def navigate(self, route: str) -> None:
        logger.warning("Session rejected by backend, continue at %s", route)


class RedirectNavigator(Navigator):
    """Remembers the requested route so the host can issue the redirect."""

    def __init__(self) -> None:
        self.location: str | None = None

    def navigate(self, route: str) -> None:
        self.location = route
