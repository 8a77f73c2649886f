"""Project service layer with business logic."""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union
from uuid import UUID

import pydantic
from sqlalchemy import and_, desc, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from models.project import Project, ProjectMember
from models.task import Task
from models.user import User
from app.core.config import SearchPolicyEnum, settings
from app.domains.project import policy
from app.domains.project.filters import build_filter, to_where_clause
from app.exceptions.base import ValidationError
from app.exceptions.project import ProjectAccessDeniedError, ProjectNotFoundError
from app.schemas.project import ProjectCreate, ProjectFilter, ProjectUpdate, TeamMemberCreate
from app.schemas.user import Caller
from app.shared.data_access import data_access
from app.shared.pagination import PaginationParams, paginate

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)

PROJECT_LOADERS = (
    selectinload(Project.manager),
    selectinload(Project.members).selectinload(ProjectMember.user),
)
TASK_LOADERS = (
    selectinload(Task.assigned_to),
    selectinload(Task.created_by),
)
ORDERINGS = {
    "-created_at": (desc(Project.created_at),),
}


def validate_payload(schema: Type[SchemaT], payload: Union[SchemaT, Dict[str, Any]]) -> SchemaT:
    """Accept an already-validated schema or validate a raw mapping against it."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = [
            {
                "loc": list(err.get("loc", [])),
                "msg": str(err.get("msg", "")),
                "type": err.get("type"),
            }
            for err in e.errors()
        ]
        raise ValidationError("Invalid project data", details={"errors": errors}) from e


async def get_live_project(db: AsyncSession, project_id: UUID) -> Optional[Project]:
    """Fetch an active project with manager and team freshly loaded, or None."""
    stmt = (
        select(Project)
        .options(*PROJECT_LOADERS)
        .where(and_(Project.id == project_id, Project.is_active.is_(True)))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


class ProjectService:
    """Service class for project business logic."""

    def __init__(
        self,
        db: AsyncSession,
        search_policy: SearchPolicyEnum | None = None,
        default_team_role: str | None = None,
    ):
        self.db = db
        self.search_policy = search_policy or settings.developer_search_policy
        self.default_team_role = default_team_role or settings.default_team_role

    async def list_projects(
        self,
        caller: Caller,
        filters: Optional[ProjectFilter] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        """Get a page of live projects visible to the caller."""

        pagination = pagination or PaginationParams(limit=settings.default_page_size)
        spec = build_filter(caller, filters, pagination, self.search_policy)
        query = (
            select(Project)
            .where(to_where_clause(spec))
            .execution_options(populate_existing=True)
        )

        async with data_access(self.db, "fetch projects"):
            return await paginate(
                self.db,
                query,
                PaginationParams(page=pagination.page, limit=spec.limit),
                order_by=ORDERINGS[spec.order_by],
                loader_options=PROJECT_LOADERS,
            )

    async def get_project(self, caller: Caller, project_id: UUID) -> Dict[str, Any]:
        """Get a project and its live tasks, newest first."""

        async with data_access(self.db, "fetch project"):
            project = await get_live_project(self.db, project_id)
            if not project:
                raise ProjectNotFoundError()
            if not policy.can_read(caller, project):
                raise ProjectAccessDeniedError()

            tasks = await self._get_live_tasks(project.id)

        return {"project": project, "tasks": tasks}

    async def create_project(
        self, caller: Caller, project_data: Union[ProjectCreate, Dict[str, Any]]
    ) -> Project:
        """Create a new project managed by the caller."""

        if not policy.can_create(caller):
            raise ProjectAccessDeniedError("Only admins and managers can create projects")

        project_data = validate_payload(ProjectCreate, project_data)

        project = Project(
            name=project_data.name,
            description=project_data.description,
            status=project_data.status,
            priority=project_data.priority,
            manager_id=caller.id,
            is_active=True,
        )
        for member in project_data.team:
            project.members.append(
                ProjectMember(user_id=member.user_id, role=member.role or self.default_team_role)
            )

        async with data_access(self.db, "create project"):
            await self._check_team_users_exist(project_data.team)
            self.db.add(project)
            await self.db.commit()
            logger.info("Project %s created by %s", project.id, caller.id)
            return await get_live_project(self.db, project.id)

    async def update_project(
        self,
        caller: Caller,
        project_id: UUID,
        project_data: Union[ProjectUpdate, Dict[str, Any]],
    ) -> Project:
        """Apply a partial update to a project."""

        async with data_access(self.db, "update project"):
            project = await get_live_project(self.db, project_id)
            if not project:
                raise ProjectNotFoundError()
            if not policy.can_write(caller, project):
                raise ProjectAccessDeniedError()

            project_data = validate_payload(ProjectUpdate, project_data)
            update_data = project_data.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                setattr(project, field, value)

            await self.db.commit()
            logger.info("Project %s updated by %s: %s", project_id, caller.id, sorted(update_data))
            return await get_live_project(self.db, project_id)

    async def delete_project(self, caller: Caller, project_id: UUID) -> bool:
        """Soft-delete a project and every task that references it.

        Both flags are written in one transaction.
        """

        async with data_access(self.db, "delete project"):
            project = await get_live_project(self.db, project_id)
            if not project:
                raise ProjectNotFoundError()
            if not policy.can_delete(caller, project):
                raise ProjectAccessDeniedError()

            project.is_active = False
            # Unconditional on task state: inactive tasks are re-marked too
            result = await self.db.execute(
                update(Task).where(Task.project_id == project_id).values(is_active=False)
            )
            await self.db.commit()

        logger.info(
            "Project %s deleted by %s, %s task(s) deactivated",
            project_id,
            caller.id,
            result.rowcount,
        )
        return True

    async def deactivate_orphaned_tasks(self) -> int:
        """Deactivate live tasks whose project is inactive or missing.

        Reconciliation for rows left behind by writers that did not cascade.
        Returns the number of tasks changed.
        """

        inactive_projects = select(Project.id).where(Project.is_active.is_(False))
        all_projects = select(Project.id)
        stmt = (
            update(Task)
            .where(
                and_(
                    Task.is_active.is_(True),
                    or_(
                        Task.project_id.in_(inactive_projects),
                        Task.project_id.not_in(all_projects),
                    ),
                )
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )

        async with data_access(self.db, "deactivate orphaned tasks"):
            result = await self.db.execute(stmt)
            await self.db.commit()

        if result.rowcount:
            logger.warning("Deactivated %s orphaned task(s)", result.rowcount)
        return result.rowcount

    # Private helper methods
    async def _check_team_users_exist(self, team: List[TeamMemberCreate]) -> None:
        """Reject team entries that reference users who do not exist."""
        if not team:
            return
        user_ids = [member.user_id for member in team]
        result = await self.db.execute(select(User.id).where(User.id.in_(user_ids)))
        known = set(result.scalars().all())
        errors = [
            {"loc": ["team", index, "user_id"], "msg": "User not found", "type": "not_found"}
            for index, user_id in enumerate(user_ids)
            if user_id not in known
        ]
        if errors:
            raise ValidationError("Invalid project data", details={"errors": errors})

    async def _get_live_tasks(self, project_id: UUID) -> List[Task]:
        stmt = (
            select(Task)
            .options(*TASK_LOADERS)
            .where(and_(Task.project_id == project_id, Task.is_active.is_(True)))
            .order_by(desc(Task.created_at))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
