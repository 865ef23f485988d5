"""Base schema utilities."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class TimestampMixin(BaseModel):
    """Mixin for created_at/updated_at timestamps."""

    created_at: datetime
    updated_at: Optional[datetime] = None


class IDMixin(BaseModel):
    """Mixin for UUID id field."""

    id: UUID


class ActionResponse(BaseModel):
    """Generic result of a form-style action."""

    success: bool = True
    data: Optional[dict[str, Any]] = None


def reject_null(value: Any) -> Any:
    """Field validator body for optional update fields backed by NOT NULL columns."""
    if value is None:
        raise ValueError("may not be null")
    return value
