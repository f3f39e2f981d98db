from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request  # type: ignore[import-not-found]
from fastapi.responses import HTMLResponse, RedirectResponse  # type: ignore[import-not-found]
from fastapi.templating import Jinja2Templates  # type: ignore[import-not-found]
from yacs.config import CfgNode  # type: ignore[import-untyped]

from ..client import SkillHubClient, create_client
from ..errors import ApiError, UnauthorizedError
from ..models import SkillListParams
from ..navigation import RedirectNavigator
from .session import CookieSessionStore


TEMPLATE_ROOT = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_ROOT))

router = APIRouter(tags=["skillhub-web"])

DEFAULT_PAGE_SIZE = 20


def get_settings(request: Request) -> CfgNode:
    settings = getattr(request.app.state, "settings", None)
    if not isinstance(settings, CfgNode):
        raise RuntimeError("SkillHub web settings are not configured")
    return settings


def get_session_store(
    request: Request,
    settings: CfgNode = Depends(get_settings),
) -> CookieSessionStore:
    store = CookieSessionStore.from_request(request, cookie_name=settings.SESSION.TOKEN_KEY)
    request.state.session_store = store
    return store


async def get_client(
    request: Request,
    settings: CfgNode = Depends(get_settings),
    store: CookieSessionStore = Depends(get_session_store),
) -> AsyncIterator[SkillHubClient]:
    navigator = RedirectNavigator()
    request.state.navigator = navigator
    client = create_client(settings, store=store, navigator=navigator)
    try:
        yield client
    finally:
        await client.aclose()


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    client: SkillHubClient = Depends(get_client),
    settings: CfgNode = Depends(get_settings),
):
    error = None
    skills = []
    try:
        page = await client.skills.list(
            SkillListParams(sort="stars", limit=settings.WEB.FEATURED_LIMIT)
        )
        skills = page.data
    except UnauthorizedError:
        raise
    except ApiError as exc:
        error = str(exc.detail)
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={
            "skills": skills,
            "error": error,
            "logged_in": client.store.get() is not None,
        },
    )


@router.get("/skills", response_class=HTMLResponse)
async def list_skills(
    request: Request,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    sort: Optional[str] = None,
    search: Optional[str] = None,
    language: Optional[str] = None,
    client: SkillHubClient = Depends(get_client),
):
    params = SkillListParams(
        page=max(page, 1),
        limit=max(limit, 1),
        sort=sort or None,
        search=search or None,
        language=language or None,
    )
    try:
        listing = await client.skills.list(params)
    except UnauthorizedError:
        raise
    except ApiError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return templates.TemplateResponse(
        request=request,
        name="skills.html",
        context={"listing": listing, "params": params},
    )


@router.get("/skills/{skill_id}", response_class=HTMLResponse)
async def skill_detail(
    request: Request,
    skill_id: str,
    client: SkillHubClient = Depends(get_client),
):
    try:
        skill = await client.skills.get(skill_id)
    except UnauthorizedError:
        raise
    except ApiError:
        return templates.TemplateResponse(
            request=request,
            name="not_found.html",
            context={"skill_id": skill_id},
            status_code=404,
        )
    return templates.TemplateResponse(
        request=request,
        name="skill_detail.html",
        context={"skill": skill, "logged_in": client.store.get() is not None},
    )


@router.get("/skills/{skill_id}/download")
async def download_skill(
    skill_id: str,
    client: SkillHubClient = Depends(get_client),
):
    try:
        link = await client.skills.download(skill_id)
    except UnauthorizedError:
        raise
    except ApiError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return RedirectResponse(link.download_url, status_code=302)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, redirect: str = "/"):
    return templates.TemplateResponse(
        request=request,
        name="login.html",
        context={"redirect": _safe_redirect(redirect), "error": None},
    )


@router.post("/login", response_class=HTMLResponse)
async def login(
    request: Request,
    client: SkillHubClient = Depends(get_client),
):
    form = await request.form()
    email = str(form.get("email", "") or "").strip()
    password = str(form.get("password", "") or "")
    redirect = _safe_redirect(str(form.get("redirect", "") or "/"))
    if not email or not password:
        return _login_error(request, redirect, "Email and password are required")
    try:
        await client.auth.login(email, password)
    except ApiError as exc:
        return _login_error(request, redirect, str(exc.detail))
    return RedirectResponse(redirect, status_code=303)


@router.post("/logout")
async def logout(client: SkillHubClient = Depends(get_client)):
    client.auth.logout()
    return RedirectResponse("/", status_code=303)


@router.get("/favorites", response_class=HTMLResponse)
async def favorites_page(
    request: Request,
    client: SkillHubClient = Depends(get_client),
):
    try:
        favorites = await client.favorites.list()
    except UnauthorizedError:
        raise
    except ApiError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return templates.TemplateResponse(
        request=request,
        name="favorites.html",
        context={"favorites": favorites},
    )


@router.post("/skills/{skill_id}/favorite")
async def add_favorite(
    skill_id: str,
    client: SkillHubClient = Depends(get_client),
):
    try:
        await client.favorites.add(skill_id)
    except UnauthorizedError:
        raise
    except ApiError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return RedirectResponse("/favorites", status_code=303)


@router.post("/favorites/{favorite_id}/delete")
async def remove_favorite(
    favorite_id: str,
    client: SkillHubClient = Depends(get_client),
):
    try:
        await client.favorites.remove(favorite_id)
    except UnauthorizedError:
        raise
    except ApiError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return RedirectResponse("/favorites", status_code=303)


def _login_error(request: Request, redirect: str, message: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request=request,
        name="login.html",
        context={"redirect": redirect, "error": message},
        status_code=400,
    )


def _safe_redirect(target: str) -> str:
    # Only same-site paths; browsers read "//host" and "/\host" as another site.
    if not target.startswith("/") or target[1:2] in ("/", "\\"):
        return "/"
    return target
