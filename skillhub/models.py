"""
Data Models for the SkillHub client.

This module defines the Pydantic models used to validate and type the
backend's JSON payloads. It covers:
- Marketplace skills and paginated listings (Skill, PaginatedResponse)
- Query parameters for listing skills (SkillListParams)
- Auth, user and favorite payloads (AuthResponse, User, Favorite)
- Service health and platform counters (HealthStatus, PlatformStats)
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class Skill(BaseModel):
    """
    A skill listed on the marketplace.

    Read-only projection of backend state; the client never mutates it.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    name: str
    description: Optional[str] = None
    github_owner: str
    github_repo: str
    stars: int = 0
    forks: int = 0
    language: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    install_command: Optional[str] = None
    price: float = 0
    """Purchase price; 0 means free. No currency is attached."""

    marketplace: bool = False
    """True when the skill is verified for the marketplace."""

    downloaded_count: int = 0
    last_synced_at: Optional[datetime] = None
    skill_content: Optional[str] = None
    readme_content: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.github_owner}/{self.github_repo}"

    @property
    def github_url(self) -> str:
        return f"https://github.com/{self.full_name}"

    @property
    def is_free(self) -> bool:
        return self.price <= 0


class PaginatedResponse(BaseModel, Generic[T]):
    """
    One page of a listing.

    `total_pages` is computed by the backend and taken as-is.
    """
    model_config = ConfigDict(extra="allow")

    data: List[T]
    page: int
    limit: int
    total: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


class SkillListParams(BaseModel):
    """Filters accepted by `GET /api/skills`."""
    page: Optional[int] = None
    limit: Optional[int] = None
    sort: Optional[str] = None
    search: Optional[str] = None
    language: Optional[str] = None

    def to_query(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class DownloadLink(BaseModel):
    download_url: str


class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    provider: str = "email"
    role: str = "user"
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Body returned by register/login. Unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None


class Favorite(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    skill_id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    skill: Optional[Skill] = None


class HealthStatus(BaseModel):
    status: str
    version: str


class PlatformStats(BaseModel):
    total_users: int = 0
    total_skills: int = 0
    total_payments: int = 0


class ApiEnvelope(BaseModel, Generic[T]):
    """`{success, data, message}` wrapper used by the backend's admin routes."""
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
