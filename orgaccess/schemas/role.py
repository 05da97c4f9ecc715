"""
Role schemas. Roles only ever grant.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from orgaccess.schemas.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema, SearchFilters, not_null
from orgaccess.schemas.permission import Permission


class RolePermissionAssignment(BaseSchema):
    permission: Permission
    scope_id: Optional[str] = None


class Role(BaseSchema):
    id: str
    label: str
    permissions: list[RolePermissionAssignment] = Field(default_factory=list)


class RoleCreate(BaseCreateSchema):
    label: str = Field(..., min_length=1, max_length=100)
    permissions: list[RolePermissionAssignment] = Field(default_factory=list)


class RoleUpdate(BaseUpdateSchema):
    label: Optional[str] = Field(default=None, min_length=1, max_length=100)
    permissions: Optional[list[RolePermissionAssignment]] = None

    @field_validator("label", "permissions")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class RoleFilters(SearchFilters):
    pass
