"""
Permission schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from orgaccess.schemas.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema, SearchFilters, not_null


def _validate_key(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Permission key is required")
    return value


class Permission(BaseSchema):
    id: str
    permission_key: str = Field(..., description="Token compared by exact match")
    description: str = Field(default="")


class PermissionCreate(BaseCreateSchema):
    permission_key: str
    description: str = Field(default="")

    @field_validator("permission_key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        return _validate_key(value)


class PermissionUpdate(BaseUpdateSchema):
    permission_key: Optional[str] = None
    description: Optional[str] = None

    @field_validator("permission_key")
    @classmethod
    def validate_key(cls, value: Optional[str]) -> str:
        return _validate_key(not_null(value))

    @field_validator("description")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class PermissionFilters(SearchFilters):
    """Search matches the key or the description"""
    pass
