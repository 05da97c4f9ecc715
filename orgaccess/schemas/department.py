"""
Department schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from orgaccess.schemas.base import AuditFields, BaseCreateSchema, BaseSchema, BaseUpdateSchema, SearchFilters, not_null
from orgaccess.schemas.permission import Permission


class Department(BaseSchema, AuditFields):
    id: str
    label: str
    parent_department_id: Optional[str] = None
    manager_user_id: Optional[str] = None
    site_id: str
    permissions: list[Permission] = Field(default_factory=list)

    def has_permission(self, permission_id: str) -> bool:
        return any(p.id == permission_id for p in self.permissions)


class DepartmentCreate(BaseCreateSchema):
    label: str = Field(..., min_length=1, max_length=100)
    site_id: str
    parent_department_id: Optional[str] = None
    manager_user_id: Optional[str] = None


class DepartmentUpdate(BaseUpdateSchema):
    """Bulk replacement of the mutable fields"""
    label: Optional[str] = Field(default=None, min_length=1, max_length=100)
    site_id: Optional[str] = None
    manager_user_id: Optional[str] = None

    @field_validator("label", "site_id")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class DepartmentFilters(SearchFilters):
    site_id: Optional[str] = None
