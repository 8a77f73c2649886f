"""
Project model and its ordered team membership.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Project(BaseModel):
    """
    Represents a project entity in the application.

    ``members`` is the project's team: an ordered list kept in insertion order
    through the ``position`` column. ``is_active`` is the soft-delete flag.
    """

    __tablename__ = "projects"

    name = Column(String(255), nullable=False)
    description = Column(Text)
    # planned, active, completed, cancelled
    status = Column(String(20), nullable=False, default="planned")
    priority = Column(String(20), nullable=False, default="medium")  # low, medium, high
    manager_id = Column(UUID(), ForeignKey("users.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Relationships
    manager = relationship("User", back_populates="managed_projects")
    members = relationship(
        "ProjectMember",
        back_populates="project",
        order_by="ProjectMember.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    tasks = relationship("Task", back_populates="project")

    @property
    def team(self):
        """The ordered team, as ``ProjectMember`` entries."""
        return self.members


class ProjectMember(BaseModel):
    """A single ``{user, role}`` entry of a project's team."""

    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_member"),)

    project_id = Column(UUID(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False)
    role = Column(String(50), nullable=False, default="developer")
    position = Column(Integer, nullable=False, default=0)

    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="memberships")
