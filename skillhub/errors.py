from __future__ import annotations

from typing import Any


class ApiError(RuntimeError):
    """Non-2xx response from the SkillHub backend."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"SkillHub API error: {status_code} {detail}")

    def to_payload(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": {"status_code": self.status_code, "detail": self.detail},
        }


class UnauthorizedError(ApiError):
    """401. Raised after the session has been cleared."""


class NotFoundError(ApiError):
    """404 on a single-resource fetch."""


def error_for_status(status_code: int, detail: Any) -> ApiError:
    if status_code == 401:
        return UnauthorizedError(status_code, detail)
    if status_code == 404:
        return NotFoundError(status_code, detail)
    return ApiError(status_code, detail)
