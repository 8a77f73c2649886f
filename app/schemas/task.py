"""Task schemas for response serialization."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from .base import BaseModelSchema
from .user import UserSummary


class TaskResponse(BaseModelSchema):
    """Schema for a task listed under its project, with people resolved."""

    project_id: UUID
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: datetime | None = None
    is_active: bool
    assigned_to: UserSummary | None = None
    created_by: UserSummary | None = None
