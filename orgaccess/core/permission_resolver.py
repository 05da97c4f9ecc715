"""
Permission resolution.

Decides whether a user holds a permission key from the user's direct
assignments and the grants of the user's roles. Nothing is cached: role and
assignment membership may change between calls, so every call re-reads the
user value it is given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

import structlog

from orgaccess.core.exceptions import AuthorizationError
from orgaccess.core.rbac import ROOT_PERMISSION_KEY, PermissionKeys, normalize_permission_key
from orgaccess.schemas.user import User

logger = structlog.get_logger()


def _in_scope(assignment: Any, scope_id: Optional[str]) -> bool:
    # Unscoped requests ignore assignment scopes; scoped requests accept
    # global assignments and the matching scope only.
    if scope_id is None:
        return True
    return assignment.scope_id is None or assignment.scope_id == scope_id


def _matches(assignments: Iterable[Any], key: str, scope_id: Optional[str]) -> bool:
    """Root first, then the exact key."""
    candidates = [a for a in assignments if _in_scope(a, scope_id)]
    if any(a.permission.permission_key == ROOT_PERMISSION_KEY for a in candidates):
        return True
    return any(a.permission.permission_key == key for a in candidates)


class PermissionResolver(ABC):
    @abstractmethod
    def has(self, user: User, key: str | PermissionKeys, scope_id: Optional[str] = None) -> bool:
        raise NotImplementedError

    def check(self, user: User, key: str | PermissionKeys, scope_id: Optional[str] = None) -> None:
        """Raise AuthorizationError unless ``user`` holds ``key``; the error names no key."""
        if not self.has(user, key, scope_id):
            logger.warning(
                "Permission denied",
                user_id=user.id,
                required=normalize_permission_key(key),
                scope_id=scope_id,
            )
            raise AuthorizationError()


class AssignmentPermissionResolver(PermissionResolver):
    """
    First match wins, otherwise deny:

    1. a direct non-deny assignment of ``root``
    2. a direct non-deny assignment of the requested key
    3. a role assignment of ``root`` or of the requested key

    Deny entries never grant. They only drop out of steps 1 and 2; role
    grants are unaffected by them.
    """

    def has(self, user: User, key: str | PermissionKeys, scope_id: Optional[str] = None) -> bool:
        key = normalize_permission_key(key)

        direct_grants = [a for a in user.permissions if not a.is_deny]
        if _matches(direct_grants, key, scope_id):
            return True

        for role in user.roles:
            if _matches(role.permissions, key, scope_id):
                return True

        return False


permission_resolver = AssignmentPermissionResolver()
