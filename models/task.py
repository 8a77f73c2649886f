"""
A module defining the `Task` ORM model.

Tasks belong to exactly one project and follow its lifetime: soft-deleting a
project soft-deletes every task that references it.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Task(BaseModel):
    __tablename__ = "tasks"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    assigned_to_id = Column(UUID(), ForeignKey("users.id"))
    created_by_id = Column(UUID(), ForeignKey("users.id"), nullable=False)

    title = Column(String(500), nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default="todo")  # todo, in_progress, review, done
    priority = Column(String(20), nullable=False, default="medium")  # low, medium, high
    due_date = Column(DateTime)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    created_by = relationship("User", foreign_keys=[created_by_id])
