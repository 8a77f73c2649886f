"""Base schemas for the application."""

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""
    model_config = ConfigDict(from_attributes=True)


class BaseModelSchema(BaseSchema):
    """Base schema for rows carrying the common id and timestamps."""
    id: UUID
    created_at: datetime
    updated_at: datetime


class ResponseSchema(BaseSchema):
    """Success envelope for single-resource endpoints."""
    status: Literal["success"] = "success"
    message: Optional[str] = None
    data: Optional[dict] = None


class ErrorResponse(BaseSchema):
    """Error envelope rendered by the global exception handlers."""
    status: Literal["error"] = "error"
    message: str
    error_code: str
    details: Any = None
    timestamp: str
    request_id: Optional[str] = None
