"""Project access rules.

Pure decisions over a caller and a project; nothing here touches the store.
Manager access never depends on team membership, and team membership alone
only grants read access.
"""

from models.project import Project
from app.schemas.user import Caller

CREATOR_ROLES = frozenset({"admin", "manager"})


def is_manager(caller: Caller, project: Project) -> bool:
    return project.manager_id == caller.id


def is_team_member(caller: Caller, project: Project) -> bool:
    return any(member.user_id == caller.id for member in project.team)


def can_read(caller: Caller, project: Project) -> bool:
    """Admins, the project manager and team members may read."""
    return caller.is_admin or is_manager(caller, project) or is_team_member(caller, project)


def can_write(caller: Caller, project: Project) -> bool:
    """Only admins and the project manager may modify a project or its team."""
    return caller.is_admin or is_manager(caller, project)


def can_delete(caller: Caller, project: Project) -> bool:
    return can_write(caller, project)


def can_create(caller: Caller) -> bool:
    return caller.role in CREATOR_ROLES
