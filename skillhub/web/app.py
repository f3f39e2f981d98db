from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request  # type: ignore[import-not-found]
from fastapi.responses import RedirectResponse  # type: ignore[import-not-found]

from ..config import config
from ..errors import UnauthorizedError
from ..logging_config import setup_logging
from .routes import router
from .session import CookieSessionStore


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    yield


async def _redirect_to_login(request: Request, _exc: UnauthorizedError) -> RedirectResponse:
    navigator = getattr(request.state, "navigator", None)
    location = getattr(navigator, "location", None) or config.API.LOGIN_ROUTE
    return RedirectResponse(location, status_code=303)


async def _persist_session(request: Request, call_next):
    response = await call_next(request)
    store = getattr(request.state, "session_store", None)
    if isinstance(store, CookieSessionStore):
        store.apply(response)
    return response


def create_app() -> FastAPI:
    app = FastAPI(
        title="SkillHub",
        description="Marketplace frontend for browsing and installing agent skills.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.add_exception_handler(UnauthorizedError, _redirect_to_login)
    app.middleware("http")(_persist_session)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "skillhub.web.app:app",
        host=config.WEB.HOST,
        port=config.WEB.PORT,
        reload=False,
    )
