"""
Request/response middleware for the SkillHub client.

Hooks are plain async callables registered on ``httpx.AsyncClient`` through
``event_hooks``. Pre-request hooks receive the outgoing ``httpx.Request``,
post-response hooks receive the ``httpx.Response`` before the caller sees it.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

import httpx

from .navigation import Navigator
from .session import SessionStore

logger = logging.getLogger(__name__)

RequestHook = Callable[[httpx.Request], Awaitable[None]]
ResponseHook = Callable[[httpx.Response], Awaitable[None]]


class BearerTokenHook:
    """Attaches ``Authorization: Bearer <token>`` while a token is stored."""

    def __init__(self, store: SessionStore):
        self._store = store

    async def __call__(self, request: httpx.Request) -> None:
        token = self._store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        else:
            request.headers.pop("Authorization", None)


class UnauthorizedHook:
    """On 401: drop the stored token and send the user to the login route."""

    def __init__(self, store: SessionStore, navigator: Navigator, login_route: str):
        self._store = store
        self._navigator = navigator
        self._login_route = login_route

    async def __call__(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        logger.info(
            "401 from %s %s, clearing session",
            response.request.method,
            response.request.url.path,
        )
        self._store.clear()
        self._navigator.navigate(self._login_route)


async def log_request(request: httpx.Request) -> None:
    logger.debug("-> %s %s", request.method, request.url)


async def log_response(response: httpx.Response) -> None:
    logger.debug(
        "<- %s %s %s",
        response.status_code,
        response.request.method,
        response.request.url,
    )
