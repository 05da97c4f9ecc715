"""
Permission Service
Catalogue of permission records that roles, users and departments point at.
"""

from typing import List, Optional
from uuid import uuid4

import structlog

from orgaccess.core.exceptions import DuplicateEntityError, EntityNotFoundError
from orgaccess.core.pagination import ListParams, Page
from orgaccess.core.permission_resolver import PermissionResolver, permission_resolver
from orgaccess.core.rbac import ALL_PERMISSION_KEYS, PermissionKeys
from orgaccess.repositories.base import PermissionRepository
from orgaccess.schemas.base import merge_changes
from orgaccess.schemas.permission import Permission, PermissionCreate, PermissionFilters, PermissionUpdate
from orgaccess.schemas.user import User

logger = structlog.get_logger()


class PermissionService:
    def __init__(self, permissions: PermissionRepository, resolver: PermissionResolver = permission_resolver):
        self.repository = permissions
        self.resolver = resolver

    async def create_permission(self, actor: User, permission_in: PermissionCreate) -> Permission:
        self.resolver.check(actor, PermissionKeys.MANAGE_PERMISSIONS)

        if await self.repository.find_by_key(permission_in.permission_key):
            raise DuplicateEntityError(f"Permission '{permission_in.permission_key}' already exists")

        permission = Permission(
            id=str(uuid4()),
            permission_key=permission_in.permission_key,
            description=permission_in.description,
        )
        created = await self.repository.create(permission)
        logger.info("Permission created", id=created.id, key=created.permission_key, actor_id=actor.id)
        return created

    async def get_permission(self, actor: User, permission_id: str) -> Optional[Permission]:
        self.resolver.check(actor, PermissionKeys.READ_PERMISSIONS)
        return await self.repository.find_by_id(permission_id)

    async def get_by_key(self, actor: User, permission_key: str) -> Optional[Permission]:
        self.resolver.check(actor, PermissionKeys.READ_PERMISSIONS)
        return await self.repository.find_by_key(permission_key)

    async def list_permissions(
        self,
        actor: User,
        params: ListParams,
        filters: Optional[PermissionFilters] = None,
    ) -> Page[Permission]:
        self.resolver.check(actor, PermissionKeys.READ_PERMISSIONS)
        return await self.repository.find_page(params, filters)

    async def update_permission(self, actor: User, permission_id: str, permission_in: PermissionUpdate) -> Permission:
        self.resolver.check(actor, PermissionKeys.MANAGE_PERMISSIONS)

        permission = await self.repository.find_by_id(permission_id)
        if permission is None:
            raise EntityNotFoundError("Permission", permission_id)

        changes = permission_in.changes()
        new_key = changes.get("permission_key")
        if new_key and new_key != permission.permission_key:
            existing = await self.repository.find_by_key(new_key)
            if existing and existing.id != permission_id:
                raise DuplicateEntityError(f"Permission '{new_key}' already exists")

        saved = await self.repository.update(merge_changes(permission, changes))
        logger.info("Permission updated", id=permission_id, actor_id=actor.id)
        return saved

    async def delete_permission(self, actor: User, permission_id: str) -> None:
        self.resolver.check(actor, PermissionKeys.MANAGE_PERMISSIONS)
        await self.repository.delete(permission_id)
        logger.info("Permission deleted", id=permission_id, actor_id=actor.id)

    async def sync_catalogue(self, actor: User) -> List[Permission]:
        """Create a record for every known key that has none yet; returns the new ones"""
        self.resolver.check(actor, PermissionKeys.MANAGE_PERMISSIONS)

        created = []
        for key in ALL_PERMISSION_KEYS:
            if await self.repository.find_by_key(key):
                continue
            permission = await self.repository.create(Permission(id=str(uuid4()), permission_key=key))
            created.append(permission)

        logger.info("Permission catalogue synced", created=len(created), actor_id=actor.id)
        return created
