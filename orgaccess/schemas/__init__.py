"""
Pydantic entity and request schemas
"""

from orgaccess.schemas.department import Department, DepartmentCreate, DepartmentFilters, DepartmentUpdate
from orgaccess.schemas.permission import Permission, PermissionCreate, PermissionFilters, PermissionUpdate
from orgaccess.schemas.role import Role, RoleCreate, RoleFilters, RolePermissionAssignment, RoleUpdate
from orgaccess.schemas.site import Site, SiteCreate, SiteFilters, SiteUpdate
from orgaccess.schemas.user import AssignmentEffect, User, UserFilters, UserPermissionAssignment, UserStatus
from orgaccess.schemas.user_group import UserGroup, UserGroupCreate, UserGroupFilters, UserGroupUpdate

__all__ = [
    "AssignmentEffect",
    "Department",
    "DepartmentCreate",
    "DepartmentFilters",
    "DepartmentUpdate",
    "Permission",
    "PermissionCreate",
    "PermissionFilters",
    "PermissionUpdate",
    "Role",
    "RoleCreate",
    "RoleFilters",
    "RolePermissionAssignment",
    "RoleUpdate",
    "Site",
    "SiteCreate",
    "SiteFilters",
    "SiteUpdate",
    "User",
    "UserFilters",
    "UserGroup",
    "UserGroupCreate",
    "UserGroupFilters",
    "UserGroupUpdate",
    "UserPermissionAssignment",
    "UserStatus",
]
