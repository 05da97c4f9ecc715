"""
User schemas and direct permission assignments.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from orgaccess.schemas.base import BaseSchema, SearchFilters
from orgaccess.schemas.permission import Permission
from orgaccess.schemas.role import Role


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class AssignmentEffect(str, Enum):
    GRANT = "grant"
    DENY = "deny"


class UserPermissionAssignment(BaseSchema):
    """A permission held directly by a user, either granted or denied."""
    permission: Permission
    scope_id: Optional[str] = None
    effect: AssignmentEffect = AssignmentEffect.GRANT

    @property
    def is_deny(self) -> bool:
        return self.effect == AssignmentEffect.DENY

    @classmethod
    def grant(cls, permission: Permission, scope_id: Optional[str] = None) -> "UserPermissionAssignment":
        return cls(permission=permission, scope_id=scope_id, effect=AssignmentEffect.GRANT)

    @classmethod
    def deny(cls, permission: Permission, scope_id: Optional[str] = None) -> "UserPermissionAssignment":
        return cls(permission=permission, scope_id=scope_id, effect=AssignmentEffect.DENY)


class User(BaseSchema):
    id: str
    display_name: str
    status: UserStatus = UserStatus.ACTIVE
    # None only after an explicit removal from its department
    department_id: Optional[str] = None
    site_id: str
    roles: list[Role] = Field(default_factory=list)
    permissions: list[UserPermissionAssignment] = Field(default_factory=list)

    def has_role(self, role_id: str) -> bool:
        return any(role.id == role_id for role in self.roles)


class UserFilters(SearchFilters):
    department_id: Optional[str] = None
    site_id: Optional[str] = None
    status: Optional[UserStatus] = None
