"""Project API controller with FastAPI endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db, validate_token
from app.domains.project.service import ProjectService
from app.domains.project.team import TeamService
from app.exceptions.base import ValidationError
from app.schemas.base import ResponseSchema
from app.schemas.project import (
    PROJECT_PRIORITY_PATTERN,
    PROJECT_STATUS_PATTERN,
    ProjectCreate,
    ProjectDetail,
    ProjectFilter,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    TeamMemberCreate,
)
from app.schemas.task import TaskResponse
from app.schemas.user import Caller
from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.get("/", response_model=ProjectListResponse)
async def list_projects(
    status: Optional[str] = Query(None, pattern=PROJECT_STATUS_PATTERN),
    priority: Optional[str] = Query(None, pattern=PROJECT_PRIORITY_PATTERN),
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Page size, capped by MAX_PAGE_SIZE"),
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of projects visible to the caller."""

    limit = limit or settings.default_page_size
    if limit > settings.max_page_size:
        raise ValidationError(
            "Invalid pagination",
            details={
                "errors": [
                    {
                        "loc": ["query", "limit"],
                        "msg": f"Input should be less than or equal to {settings.max_page_size}",
                        "type": "less_than_equal",
                    }
                ]
            },
        )

    filters = ProjectFilter(status=status, priority=priority, search=search)
    pagination = PaginationParams(page=page, limit=limit)

    service = ProjectService(db)
    result = await service.list_projects(current_user, filters=filters, pagination=pagination)

    return ProjectListResponse(
        message="Projects retrieved successfully",
        projects=[ProjectResponse.model_validate(project) for project in result["items"]],
        total=result["total"],
        total_pages=result["total_pages"],
        current_page=result["current_page"],
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a project together with its live tasks."""

    service = ProjectService(db)
    result = await service.get_project(current_user, project_id)

    detail = ProjectDetail(
        project=ProjectResponse.model_validate(result["project"]),
        tasks=[TaskResponse.model_validate(task) for task in result["tasks"]],
    )

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=detail.model_dump(),
    )


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new project managed by the caller."""

    service = ProjectService(db)
    project = await service.create_project(current_user, project_data)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.put("/{project_id}", response_model=ResponseSchema)
async def update_project(
    project_id: UUID = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a project."""

    service = ProjectService(db)
    project = await service.update_project(current_user, project_id, project_data)

    return ResponseSchema(
        status="success",
        message="Project updated successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a project and its tasks."""

    service = ProjectService(db)
    await service.delete_project(current_user, project_id)

    return ResponseSchema(status="success", message="Project deleted successfully", data=None)


@router.post("/{project_id}/team", response_model=ResponseSchema)
async def add_team_member(
    project_id: UUID = Path(..., description="Project ID"),
    member_data: TeamMemberCreate = Body(...),
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Add a user to the project's team."""

    service = TeamService(db)
    project = await service.add_member(current_user, project_id, member_data)

    return ResponseSchema(
        status="success",
        message="Team member added successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.delete("/{project_id}/team/{user_id}", response_model=ResponseSchema)
async def remove_team_member(
    project_id: UUID = Path(..., description="Project ID"),
    user_id: UUID = Path(..., description="User ID of the member to remove"),
    current_user: Caller = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove a user from the project's team."""

    service = TeamService(db)
    project = await service.remove_member(current_user, project_id, user_id)

    return ResponseSchema(
        status="success",
        message="Team member removed successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )
