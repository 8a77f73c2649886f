"""
Provides the User model for the application's database schema.

Users are referenced by projects (as manager or team member) and by tasks
(as assignee or creator). Only ``name`` and ``email`` are exposed when a
reference is resolved for a response.

Attributes
----------
name : sqlalchemy.Column
    Display name of the user.
email : sqlalchemy.Column
    The email address of the user, which must be unique.
role : sqlalchemy.Column
    Global role: ``admin``, ``manager`` or ``developer``.
is_active : sqlalchemy.Column
    A boolean indicating if the user is active. Defaults to `True`.
"""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar name: Display name of the user.
    :type name: str
    :ivar email: Email address of the user. It must be unique.
    :type email: str
    :ivar role: Global role used by project access checks.
    :type role: str
    :ivar is_active: Indicates whether the user account is active.
    :type is_active: bool
    """

    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), nullable=False, default="developer")  # admin, manager, developer
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    managed_projects = relationship("Project", back_populates="manager")
    memberships = relationship("ProjectMember", back_populates="user")
