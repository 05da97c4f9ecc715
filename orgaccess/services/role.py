"""
Role Service
"""

from typing import Optional
from uuid import uuid4

import structlog

from orgaccess.core.exceptions import DependencyConflictError, DuplicateEntityError, EntityNotFoundError
from orgaccess.core.pagination import ListParams, Page
from orgaccess.core.permission_resolver import PermissionResolver, permission_resolver
from orgaccess.core.rbac import PermissionKeys
from orgaccess.repositories.base import RoleRepository, UserRepository
from orgaccess.schemas.base import merge_changes
from orgaccess.schemas.role import Role, RoleCreate, RoleFilters, RoleUpdate
from orgaccess.schemas.user import User

logger = structlog.get_logger()

ROLE_ASSIGNED_DETAIL = "Role is assigned to users"


class RoleService:
    def __init__(
        self,
        roles: RoleRepository,
        users: UserRepository,
        resolver: PermissionResolver = permission_resolver,
    ):
        self.repository = roles
        self.users = users
        self.resolver = resolver

    async def create_role(self, actor: User, role_in: RoleCreate) -> Role:
        self.resolver.check(actor, PermissionKeys.MANAGE_ROLES)

        if await self.repository.find_by_label(role_in.label):
            raise DuplicateEntityError(f"Role '{role_in.label}' already exists")

        role = Role(id=str(uuid4()), label=role_in.label, permissions=role_in.permissions)
        created = await self.repository.create(role)
        logger.info("Role created", id=created.id, label=created.label, actor_id=actor.id)
        return created

    async def get_role(self, actor: User, role_id: str) -> Optional[Role]:
        self.resolver.check(actor, PermissionKeys.READ_ROLES)
        return await self.repository.find_by_id(role_id)

    async def list_roles(
        self,
        actor: User,
        params: ListParams,
        filters: Optional[RoleFilters] = None,
    ) -> Page[Role]:
        self.resolver.check(actor, PermissionKeys.READ_ROLES)
        return await self.repository.find_page(params, filters)

    async def update_role(self, actor: User, role_id: str, role_in: RoleUpdate) -> Role:
        self.resolver.check(actor, PermissionKeys.MANAGE_ROLES)

        role = await self.repository.find_by_id(role_id)
        if role is None:
            raise EntityNotFoundError("Role", role_id)

        saved = await self.repository.update(merge_changes(role, role_in.changes()))
        logger.info("Role updated", id=role_id, actor_id=actor.id)
        return saved

    async def delete_role(self, actor: User, role_id: str) -> None:
        self.resolver.check(actor, PermissionKeys.MANAGE_ROLES)

        holders = await self.users.find_by_role_id(role_id)
        if holders:
            logger.warning("Role deletion blocked", id=role_id, users=len(holders))
            raise DependencyConflictError(
                ROLE_ASSIGNED_DETAIL, entity="Role", entity_id=role_id, dependents=len(holders)
            )

        await self.repository.delete(role_id)
        logger.info("Role deleted", id=role_id, actor_id=actor.id)
