"""
User group schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from orgaccess.schemas.base import AuditFields, BaseCreateSchema, BaseSchema, BaseUpdateSchema, SearchFilters, not_null


class UserGroup(BaseSchema, AuditFields):
    id: str
    name: str
    responsible_ids: list[str] = Field(default_factory=list)
    member_ids: list[str] = Field(default_factory=list)
    description: Optional[str] = None

    def is_responsible(self, user_id: str) -> bool:
        return user_id in self.responsible_ids

    def is_member(self, user_id: str) -> bool:
        return user_id in self.member_ids


class UserGroupCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class UserGroupUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class UserGroupFilters(SearchFilters):
    pass
