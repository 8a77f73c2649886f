"""Project-related exceptions."""

from .base import AppPermissionError, ConflictError, NotFoundError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project does not exist or has been soft-deleted."""

    default_message = "Project not found"


class ProjectAccessDeniedError(AppPermissionError):
    """Raised when the caller lacks the permission an operation needs on an existing project."""

    default_message = "Access denied"


class DuplicateTeamMemberError(ConflictError):
    """Raised when adding a user who is already on the project's team."""

    default_message = "User is already a team member"

    def __init__(self, message: str | None = None, user_id=None):
        details = {"user_id": str(user_id)} if user_id is not None else None
        super().__init__(message, details=details)
