"""Team membership management for projects."""

import logging
from typing import Any, Dict, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.project import Project, ProjectMember
from models.user import User
from app.core.config import settings
from app.domains.project import policy
from app.domains.project.service import get_live_project, validate_payload
from app.exceptions.base import NotFoundError
from app.exceptions.project import (
    DuplicateTeamMemberError,
    ProjectAccessDeniedError,
    ProjectNotFoundError,
)
from app.schemas.project import TeamMemberCreate
from app.schemas.user import Caller
from app.shared.data_access import data_access

logger = logging.getLogger(__name__)


class TeamService:
    """Adds and removes project team members.

    Both operations need write access on the project: a team member cannot
    change the team, only the project manager or an admin can.
    """

    def __init__(self, db: AsyncSession, default_team_role: str | None = None):
        self.db = db
        self.default_team_role = default_team_role or settings.default_team_role

    async def add_member(
        self,
        caller: Caller,
        project_id: UUID,
        member_data: Union[TeamMemberCreate, Dict[str, Any]],
    ) -> Project:
        """Append a user to the team, keeping insertion order."""

        async with data_access(self.db, "add team member"):
            project = await self._get_writable_project(caller, project_id)
            member_data = validate_payload(TeamMemberCreate, member_data)

            if any(member.user_id == member_data.user_id for member in project.team):
                raise DuplicateTeamMemberError(user_id=member_data.user_id)

            if not await self._user_exists(member_data.user_id):
                raise NotFoundError("User not found", details={"user_id": str(member_data.user_id)})

            project.members.append(
                ProjectMember(
                    user_id=member_data.user_id,
                    role=member_data.role or self.default_team_role,
                )
            )
            try:
                await self.db.commit()
            except IntegrityError as e:
                # A concurrent add got there first
                await self.db.rollback()
                raise DuplicateTeamMemberError(user_id=member_data.user_id) from e

            logger.info("User %s added to project %s team", member_data.user_id, project_id)
            return await get_live_project(self.db, project_id)

    async def remove_member(self, caller: Caller, project_id: UUID, user_id: UUID) -> Project:
        """Drop every team entry for ``user_id``. Absent users are not an error."""

        async with data_access(self.db, "remove team member"):
            project = await self._get_writable_project(caller, project_id)

            for member in [m for m in project.members if m.user_id == user_id]:
                project.members.remove(member)

            await self.db.commit()
            logger.info("User %s removed from project %s team", user_id, project_id)
            return await get_live_project(self.db, project_id)

    # Private helper methods
    async def _get_writable_project(self, caller: Caller, project_id: UUID) -> Project:
        project = await get_live_project(self.db, project_id)
        if not project:
            raise ProjectNotFoundError()
        if not policy.can_write(caller, project):
            raise ProjectAccessDeniedError()
        return project

    async def _user_exists(self, user_id: UUID) -> bool:
        result = await self.db.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None
