import asyncio

import pytest

fastapi = pytest.importorskip("fastapi")
httpx = pytest.importorskip("httpx")

from fastapi import Depends, Request  # noqa: E402

from skillhub.client import SkillHubClient  # noqa: E402
from skillhub.navigation import RedirectNavigator  # noqa: E402
from skillhub.web.app import create_app  # noqa: E402
from skillhub.web.routes import _safe_redirect, get_client, get_session_store  # noqa: E402
from skillhub.web.session import CookieSessionStore  # noqa: E402
from tests.common.skillhub_backend import FakeSkillHubBackend  # noqa: E402


def _visitor(app) -> httpx.AsyncClient:
    """A browser-like client; keeps its own cookie jar between requests."""
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
        timeout=10.0,
    )


async def _request(visitor: httpx.AsyncClient, method: str, path: str, **kwargs):
    return await asyncio.wait_for(visitor.request(method, path, **kwargs), timeout=20.0)


class _WebHarness:
    def __init__(self):
        self.app = create_app()
        self.backend = FakeSkillHubBackend()
        self.navigators: list[RedirectNavigator] = []

        async def _client_override(
            request: Request,
            store: CookieSessionStore = Depends(get_session_store),
        ):
            navigator = RedirectNavigator()
            request.state.navigator = navigator
            self.navigators.append(navigator)
            client = SkillHubClient(
                "http://skillhub.test",
                store=store,
                navigator=navigator,
                transport=self.backend.transport(),
            )
            try:
                yield client
            finally:
                await client.aclose()

        self.app.dependency_overrides[get_client] = _client_override

    def close(self) -> None:
        self.app.dependency_overrides.clear()


@pytest.fixture
def web():
    harness = _WebHarness()
    try:
        yield harness
    finally:
        harness.close()


async def _login(visitor: httpx.AsyncClient, **extra):
    data = {"email": "a@b.com", "password": "x"}
    data.update(extra)
    return await _request(visitor, "POST", "/login", data=data)


@pytest.mark.asyncio
async def test_home_lists_popular_skills(web):
    async with _visitor(web.app) as visitor:
        response = await _request(visitor, "GET", "/")
    assert response.status_code == 200
    assert "Code Review Assistant" in response.text
    assert "Get Started" in response.text
    params = dict(web.backend.requests[-1].url.params)
    assert params == {"sort": "stars", "limit": "6"}


@pytest.mark.asyncio
async def test_skills_page_paginates(web):
    async with _visitor(web.app) as visitor:
        response = await _request(visitor, "GET", "/skills", params={"page": 1, "limit": 2})
    assert response.status_code == 200
    assert "page 1 of 2" in response.text
    assert "Next" in response.text
    assert "Data Analysis Helper" in response.text
    assert "API Generator" not in response.text


@pytest.mark.asyncio
async def test_skill_detail_renders_install_and_pricing(web):
    async with _visitor(web.app) as visitor:
        response = await _request(visitor, "GET", "/skills/42")
        priced = await _request(visitor, "GET", "/skills/43")
    assert response.status_code == 200
    assert "npx skills add acme/code-review-skill" in response.text
    assert "Free" in response.text
    assert priced.status_code == 200
    assert "No installation command available." in priced.text
    assert "Sign in to purchase" in priced.text


@pytest.mark.asyncio
async def test_missing_skill_renders_not_found_and_keeps_session(web):
    async with _visitor(web.app) as visitor:
        await _login(visitor)
        response = await _request(visitor, "GET", "/skills/missing")
        assert response.status_code == 404
        assert "Skill not found" in response.text
        assert "set-cookie" not in response.headers
        assert visitor.cookies.get("token") == "t1"


@pytest.mark.asyncio
async def test_download_redirects_to_artifact(web):
    async with _visitor(web.app) as visitor:
        response = await _request(visitor, "GET", "/skills/42/download")
    assert response.status_code == 302
    assert response.headers["location"].startswith("https://cdn.example.test/skills/42.zip")


@pytest.mark.asyncio
async def test_login_form_flow_and_favorites(web):
    async with _visitor(web.app) as visitor:
        page = await _request(visitor, "GET", "/login", params={"redirect": "/skills/42"})
        assert page.status_code == 200
        assert 'value="/skills/42"' in page.text

        login = await _login(visitor, redirect="/skills/42")
        assert login.status_code == 303
        assert login.headers["location"] == "/skills/42"
        assert "httponly" in login.headers["set-cookie"].lower()
        assert visitor.cookies.get("token") == "t1"

        added = await _request(visitor, "POST", "/skills/42/favorite")
        assert added.status_code == 303
        assert added.headers["location"] == "/favorites"
        assert web.backend.requests[-1].headers["Authorization"] == "Bearer t1"

        favorites = await _request(visitor, "GET", "/favorites")
        assert favorites.status_code == 200
        assert "Code Review Assistant" in favorites.text

        favorite_id = next(iter(web.backend.favorites))
        removed = await _request(visitor, "POST", f"/favorites/{favorite_id}/delete")
        assert removed.status_code == 303
        assert web.backend.favorites == {}

        logout = await _request(visitor, "POST", "/logout")
        assert logout.status_code == 303
        assert visitor.cookies.get("token") is None


@pytest.mark.asyncio
async def test_sessions_are_isolated_between_visitors(web):
    async with _visitor(web.app) as alice, _visitor(web.app) as stranger:
        assert (await _login(alice)).status_code == 303
        assert (await _request(alice, "POST", "/skills/42/favorite")).status_code == 303

        response = await _request(stranger, "GET", "/favorites")
        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert "Authorization" not in web.backend.requests[-1].headers

        home = await _request(stranger, "GET", "/")
        assert "Get Started" in home.text

        own = await _request(alice, "GET", "/favorites")
        assert own.status_code == 200
        assert "Code Review Assistant" in own.text
        assert len(web.backend.favorites) == 1


@pytest.mark.asyncio
async def test_login_failure_rerenders_form(web):
    async with _visitor(web.app) as visitor:
        response = await _login(visitor, password="wrong")
        assert response.status_code == 400
        assert "Invalid credentials" in response.text
        assert visitor.cookies.get("token") is None


@pytest.mark.asyncio
async def test_login_rejects_offsite_redirect(web):
    async with _visitor(web.app) as visitor:
        slashes = await _login(visitor, redirect="//evil.example")
        backslash = await _login(visitor, redirect="/\\evil.example")
    assert slashes.status_code == 303
    assert slashes.headers["location"] == "/"
    assert backslash.status_code == 303
    assert backslash.headers["location"] == "/"


def test_safe_redirect_keeps_local_paths_only():
    assert _safe_redirect("/skills/42") == "/skills/42"
    assert _safe_redirect("/") == "/"
    assert _safe_redirect("//evil.example") == "/"
    assert _safe_redirect("/\\evil.example") == "/"
    assert _safe_redirect("https://evil.example") == "/"
    assert _safe_redirect("") == "/"


@pytest.mark.asyncio
async def test_expired_session_redirects_to_login_and_drops_cookie(web):
    async with _visitor(web.app) as visitor:
        response = await _request(
            visitor,
            "GET",
            "/favorites",
            headers={"Cookie": "token=expired"},
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("token=")
        assert "max-age=0" in cookie
    assert web.backend.requests[-1].headers["Authorization"] == "Bearer expired"
    assert web.navigators[-1].location == "/login"
