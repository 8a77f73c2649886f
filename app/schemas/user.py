"""User-related Pydantic schemas."""

from typing import Literal
from uuid import UUID

from pydantic import Field

from .base import BaseSchema

UserRole = Literal["admin", "manager", "developer"]


class Caller(BaseSchema):
    """Identity of the authenticated actor, resolved before any project logic runs."""

    id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserSummary(BaseSchema):
    """The identity fields exposed when a user reference is resolved."""

    id: UUID
    name: str
    email: str


class TokenPayload(BaseSchema):
    """Claims carried by an access token."""

    sub: UUID
    role: UserRole | None = None
    exp: int | None = Field(None, description="Expiry as a unix timestamp")
