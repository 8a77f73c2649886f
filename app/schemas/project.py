"""Project schemas for request/response serialization."""

from __future__ import annotations

from uuid import UUID

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import BaseModelSchema, BaseSchema
from .task import TaskResponse
from .user import UserSummary

PROJECT_STATUS_PATTERN = "^(planned|active|completed|cancelled)$"
PROJECT_PRIORITY_PATTERN = "^(low|medium|high)$"


def _clean_name(v: str | None) -> str | None:
    if v is not None and isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or only whitespace")
    return v


class TeamMemberCreate(BaseSchema):
    """A team entry supplied when adding a member or creating a project."""

    user_id: UUID
    role: str | None = Field(None, max_length=50)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str | None) -> str | None:
        """Blank roles fall back to the default team role."""
        if v is not None:
            v = v.strip()
            return v or None
        return v


class ProjectBase(BaseSchema):
    """Base project schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    status: str = Field(default="planned", pattern=PROJECT_STATUS_PATTERN)
    priority: str = Field(default="medium", pattern=PROJECT_PRIORITY_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the project name."""
        return _clean_name(v)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project. The manager always comes from the caller."""

    model_config = ConfigDict(from_attributes=True, extra="forbid")

    team: list[TeamMemberCreate] = Field(default_factory=list)

    @field_validator("team")
    @classmethod
    def validate_unique_members(cls, v: list[TeamMemberCreate]) -> list[TeamMemberCreate]:
        seen = set()
        for member in v:
            if member.user_id in seen:
                raise ValueError(f"User {member.user_id} appears more than once in team")
            seen.add(member.user_id)
        return v


class ProjectUpdate(BaseSchema):
    """Schema for a partial project update. Unset fields are left untouched."""

    model_config = ConfigDict(from_attributes=True, extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: str | None = Field(None, pattern=PROJECT_STATUS_PATTERN)
    priority: str | None = Field(None, pattern=PROJECT_PRIORITY_PATTERN)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the project name."""
        return _clean_name(v)

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in ("name", "status", "priority"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class TeamMemberResponse(BaseSchema):
    """A resolved team entry."""

    user_id: UUID
    user: UserSummary | None = None
    role: str


class ProjectResponse(BaseModelSchema):
    """Schema for project response with manager and team resolved."""

    name: str
    description: str | None = None
    status: str
    priority: str
    is_active: bool
    manager_id: UUID
    manager: UserSummary | None = None
    team: list[TeamMemberResponse] = []


class ProjectDetail(BaseSchema):
    """A project together with its live tasks."""

    project: ProjectResponse
    tasks: list[TaskResponse] = []


class ProjectFilter(BaseSchema):
    """Schema for filtering projects."""

    status: str | None = Field(None, pattern=PROJECT_STATUS_PATTERN)
    priority: str | None = Field(None, pattern=PROJECT_PRIORITY_PATTERN)
    search: str | None = None

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class ProjectListResponse(BaseSchema):
    """Schema for project list response."""

    status: str = "success"
    message: str | None = None
    projects: list[ProjectResponse]
    total: int
    total_pages: int
    current_page: int
