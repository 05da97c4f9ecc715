"""
FastAPI Dependencies
Actor lookup and permission gating for hosts that expose the services over HTTP
"""

from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Query, Request, status

from orgaccess.core.config import settings
from orgaccess.core.logging import bind_actor
from orgaccess.core.pagination import ListParams
from orgaccess.core.permission_resolver import permission_resolver
from orgaccess.core.rbac import PermissionKeys
from orgaccess.schemas.user import User, UserStatus

logger = structlog.get_logger()


async def get_current_actor(request: Request) -> User:
    """
    Get the acting user placed on ``request.state.actor`` by the host's
    authentication middleware

    Raises:
        HTTPException: 401 when no actor is attached, 403 when it is not active
    """
    actor: Optional[User] = getattr(request.state, "actor", None)
    if actor is None:
        logger.warning("Missing authenticated actor", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if actor.status != UserStatus.ACTIVE:
        logger.warning("Inactive user attempted access", user_id=actor.id, status=actor.status)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")

    bind_actor(actor.id)
    return actor


def require_permission(key: PermissionKeys, scope_id: Optional[str] = None):
    """
    Dependency factory checking one permission key

    Args:
        key: Required permission key
        scope_id: Optional scope the assignment must cover

    Returns:
        Dependency function resolving to the actor
    """
    async def permission_checker(actor: User = Depends(get_current_actor)) -> User:
        # AuthorizationError is translated to 403 by the registered handler
        permission_resolver.check(actor, key, scope_id)
        logger.debug("Permission check passed", user_id=actor.id, permission=PermissionKeys(key).value)
        return actor

    return permission_checker


def list_params(
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
) -> ListParams:
    """Page parameters from the query string, capped at the configured maximum"""
    if limit is None:
        limit = settings.DEFAULT_PAGE_LIMIT
    return ListParams(page=page, limit=min(limit, settings.MAX_PAGE_LIMIT))
