"""
Models package initialization.
"""

from .base import Base, BaseModel
from .project import Project, ProjectMember
from .task import Task
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Project",
    "ProjectMember",
    "Task",
]
