from __future__ import annotations

from fastapi import Request, Response  # type: ignore[import-not-found]

from ..session import DEFAULT_TOKEN_KEY, SessionStore


class CookieSessionStore(SessionStore):
    """
    Per-visitor token storage backed by a browser cookie.

    The token is read from the request cookie; changes are kept pending and
    written onto the outgoing response by ``apply``.
    """

    def __init__(self, token: str | None = None, *, cookie_name: str = DEFAULT_TOKEN_KEY):
        self._token = token or None
        self._cookie_name = cookie_name
        self._dirty = False

    @classmethod
    def from_request(cls, request: Request, *, cookie_name: str = DEFAULT_TOKEN_KEY) -> CookieSessionStore:
        return cls(request.cookies.get(cookie_name), cookie_name=cookie_name)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        self._dirty = True

    def clear(self) -> None:
        if self._token is None and not self._dirty:
            return
        self._token = None
        self._dirty = True

    def apply(self, response: Response) -> None:
        if not self._dirty:
            return
        if self._token:
            response.set_cookie(
                self._cookie_name,
                self._token,
                httponly=True,
                samesite="lax",
                path="/",
            )
        else:
            response.delete_cookie(self._cookie_name, path="/")
