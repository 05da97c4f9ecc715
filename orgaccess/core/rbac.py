"""
RBAC helpers and canonical permission definitions.
"""

from __future__ import annotations

from enum import Enum

class PermissionKeys(str, Enum):
    """Closed set of permission keys checked by the services."""

    # Grants every other key.
    ROOT = "root"

    READ_USERS = "read-users"
    READ_USER = "read-user"
    CREATE_USER = "create-user"
    UPDATE_USER = "update-user"
    DELETE_USER = "delete-user"

    READ_DEPARTMENT = "read-department"
    READ_DEPARTMENTS = "read-departments"
    CREATE_DEPARTMENT = "create-department"
    UPDATE_DEPARTMENT = "update-department"
    DELETE_DEPARTMENT = "delete-department"
    MANAGE_DEPARTMENT_USERS = "manage-department-users"
    MANAGE_DEPARTMENT_PERMISSIONS = "manage-department-permissions"
    MANAGE_DEPARTMENT_HIERARCHY = "manage-department-hierarchy"

    READ_GROUP = "read-group"
    READ_GROUPS = "read-groups"
    CREATE_GROUP = "create-group"
    UPDATE_GROUP = "update-group"
    DELETE_GROUP = "delete-group"
    MANAGE_GROUP_MEMBERS = "manage-group-members"
    MANAGE_GROUP_RESPONSIBLES = "manage-group-responsibles"

    READ_SITE = "read-site"
    READ_SITES = "read-sites"
    MANAGE_SITES = "manage-sites"

    READ_PERMISSIONS = "read-permissions"
    MANAGE_PERMISSIONS = "manage-permissions"

    READ_ROLES = "read-roles"
    MANAGE_ROLES = "manage-roles"


ROOT_PERMISSION_KEY: str = PermissionKeys.ROOT.value

ALL_PERMISSION_KEYS: tuple[str, ...] = tuple(key.value for key in PermissionKeys)


def normalize_permission_key(key: str | PermissionKeys) -> str:
    """Return the raw token for an enum member; plain strings pass through unchanged."""
    if isinstance(key, PermissionKeys):
        return key.value
    return key
