from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import httpx
from yacs.config import CfgNode  # type: ignore[import-untyped]

from .config import config as default_config
from .errors import ApiError, error_for_status
from .hooks import (
    BearerTokenHook,
    RequestHook,
    ResponseHook,
    UnauthorizedHook,
    log_request,
    log_response,
)
from .models import (
    ApiEnvelope,
    AuthResponse,
    DownloadLink,
    Favorite,
    HealthStatus,
    PaginatedResponse,
    PlatformStats,
    Skill,
    SkillListParams,
    User,
)
from .navigation import LoggingNavigator, Navigator
from .session import FileSessionStore, SessionStore

logger = logging.getLogger(__name__)


class SkillHubClient:
    """
    Typed client for the SkillHub marketplace API.

    The session store and navigator are injected; the default hook chain is
    bearer-token injection before each request and 401 handling after each
    response. Pass ``request_hooks``/``response_hooks`` to replace the chain.
    """

    def __init__(
        self,
        base_url: str,
        *,
        store: SessionStore,
        navigator: Navigator | None = None,
        login_route: str = "/login",
        request_hooks: Sequence[RequestHook] | None = None,
        response_hooks: Sequence[ResponseHook] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self.store = store
        self.navigator = navigator or LoggingNavigator()
        if request_hooks is None:
            request_hooks = [BearerTokenHook(store), log_request]
        if response_hooks is None:
            response_hooks = [
                UnauthorizedHook(store, self.navigator, login_route),
                log_response,
            ]
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Content-Type": "application/json"},
            event_hooks={
                "request": list(request_hooks),
                "response": list(response_hooks),
            },
            timeout=None,
            transport=transport,
        )
        self.skills = SkillsApi(self)
        self.auth = AuthApi(self)
        self.favorites = FavoritesApi(self)
        self.system = SystemApi(self)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> SkillHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_payload: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._http.request(
            method,
            path,
            params=params,
            json=json_payload,
        )
        if response.status_code >= 400:
            detail = _extract_error_detail_from_response(response)
            raise error_for_status(response.status_code, detail)
        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError:
            raise ApiError(502, "Backend returned non-JSON payload")


class SkillsApi:
    def __init__(self, client: SkillHubClient):
        self._client = client

    async def list(
        self,
        params: SkillListParams | None = None,
        **filters: Any,
    ) -> PaginatedResponse[Skill]:
        if params is not None and filters:
            raise TypeError("pass either params or keyword filters, not both")
        if params is None:
            params = SkillListParams(**filters)
        payload = await self._client.request_json(
            "GET",
            "/api/skills",
            params=params.to_query(),
        )
        return PaginatedResponse[Skill].model_validate(payload)

    async def get(self, skill_id: str) -> Skill:
        payload = await self._client.request_json("GET", f"/api/skills/{skill_id}")
        return Skill.model_validate(payload)

    async def download(self, skill_id: str) -> DownloadLink:
        payload = await self._client.request_json(
            "GET",
            f"/api/skills/{skill_id}/download",
        )
        return DownloadLink.model_validate(payload)


class AuthApi:
    def __init__(self, client: SkillHubClient):
        self._client = client

    async def register(
        self,
        email: str,
        password: str,
        name: str | None = None,
    ) -> AuthResponse:
        body: dict[str, Any] = {"email": email, "password": password}
        if name is not None:
            body["name"] = name
        payload = await self._client.request_json(
            "POST",
            "/api/auth/register",
            json_payload=body,
        )
        return self._remember(payload)

    async def login(self, email: str, password: str) -> AuthResponse:
        payload = await self._client.request_json(
            "POST",
            "/api/auth/login",
            json_payload={"email": email, "password": password},
        )
        return self._remember(payload)

    async def me(self) -> User:
        payload = await self._client.request_json("GET", "/api/auth/me")
        return User.model_validate(payload)

    def logout(self) -> None:
        self._client.store.clear()

    def _remember(self, payload: Any) -> AuthResponse:
        response = AuthResponse.model_validate(payload or {})
        if response.token:
            self._client.store.set(response.token)
        return response


class FavoritesApi:
    def __init__(self, client: SkillHubClient):
        self._client = client

    async def list(self) -> list[Favorite]:
        payload = await self._client.request_json("GET", "/api/favorites")
        if isinstance(payload, dict):
            payload = payload.get("data")
        if not isinstance(payload, list):
            raise ApiError(502, "Backend returned non-list favorites payload")
        return [Favorite.model_validate(item) for item in payload]

    async def add(self, skill_id: str) -> Favorite:
        payload = await self._client.request_json(
            "POST",
            "/api/favorites",
            json_payload={"skill_id": skill_id},
        )
        return Favorite.model_validate(payload)

    async def remove(self, favorite_id: str) -> Any:
        return await self._client.request_json("DELETE", f"/api/favorites/{favorite_id}")


class SystemApi:
    def __init__(self, client: SkillHubClient):
        self._client = client

    async def health(self) -> HealthStatus:
        payload = await self._client.request_json("GET", "/health")
        return HealthStatus.model_validate(payload)

    async def stats(self) -> ApiEnvelope[PlatformStats]:
        payload = await self._client.request_json("GET", "/api/admin/stats")
        return ApiEnvelope[PlatformStats].model_validate(payload)


def create_client(
    settings: CfgNode | None = None,
    *,
    store: SessionStore | None = None,
    navigator: Navigator | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SkillHubClient:
    """Build a client from the config tree, persisting the token on disk."""
    settings = settings or default_config
    if store is None:
        store = FileSessionStore(
            Path(settings.SESSION.FILE),
            key=settings.SESSION.TOKEN_KEY,
        )
    return SkillHubClient(
        settings.API.BASE_URL,
        store=store,
        navigator=navigator,
        login_route=settings.API.LOGIN_ROUTE,
        transport=transport,
    )


def _extract_error_detail_from_response(response: httpx.Response) -> Any:
    try:
        payload = response.json()
    except json.JSONDecodeError:
        return response.text
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            detail = payload.get(key)
            if detail is not None:
                return detail
        return payload
    return payload
