"""
User Group Service
Group lifecycle plus member and responsible management.
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

import structlog

from orgaccess.core.exceptions import AuthorizationError, EntityNotFoundError, LastResponsibleError
from orgaccess.core.pagination import ListParams, Page
from orgaccess.core.permission_resolver import PermissionResolver, permission_resolver
from orgaccess.core.rbac import PermissionKeys
from orgaccess.repositories.base import UserGroupRepository, UserRepository
from orgaccess.schemas.base import creation_stamp, merge_changes, update_stamp, utcnow
from orgaccess.schemas.user import User, UserFilters
from orgaccess.schemas.user_group import UserGroup, UserGroupCreate, UserGroupFilters, UserGroupUpdate

logger = structlog.get_logger()


def ensure_responsible(group: UserGroup, actor: User) -> None:
    """
    Ownership policy for update, delete and membership changes.

    This complements the permission key checks done by the service; callers
    that expose group management apply both.
    """
    if not group.is_responsible(actor.id):
        logger.warning("Actor is not responsible for group", group_id=group.id, user_id=actor.id)
        raise AuthorizationError()


class UserGroupService:
    """Service for user group management"""

    def __init__(
        self,
        groups: UserGroupRepository,
        users: UserRepository,
        resolver: PermissionResolver = permission_resolver,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = groups
        self.users = users
        self.resolver = resolver
        self.clock = clock

    # ==================== CRUD ====================

    async def create_group(self, actor: User, group_in: UserGroupCreate) -> UserGroup:
        """Create a group; the actor becomes its first responsible and member"""
        self.resolver.check(actor, PermissionKeys.CREATE_GROUP)

        group = UserGroup(
            id=str(uuid4()),
            name=group_in.name,
            description=group_in.description,
            responsible_ids=[actor.id],
            member_ids=[actor.id],
            **creation_stamp(actor.id, self.clock()),
        )
        created = await self.repository.create(group)
        logger.info("Group created", id=created.id, name=created.name, actor_id=actor.id)
        return created

    async def get_group(self, actor: User, group_id: str) -> Optional[UserGroup]:
        self.resolver.check(actor, PermissionKeys.READ_GROUP)
        return await self.repository.find_by_id(group_id)

    async def list_groups(
        self,
        actor: User,
        params: ListParams,
        filters: Optional[UserGroupFilters] = None,
    ) -> Page[UserGroup]:
        self.resolver.check(actor, PermissionKeys.READ_GROUPS)
        return await self.repository.find_page(params, filters)

    async def update_group(self, actor: User, group_id: str, group_in: UserGroupUpdate) -> UserGroup:
        self.resolver.check(actor, PermissionKeys.UPDATE_GROUP)

        group = await self.repository.find_by_id(group_id)
        if group is None:
            raise EntityNotFoundError("UserGroup", group_id)

        updated = merge_changes(group, {**group_in.changes(), **update_stamp(actor.id, self.clock())})
        saved = await self.repository.update(updated)
        logger.info("Group updated", id=group_id, actor_id=actor.id)
        return saved

    async def delete_group(self, actor: User, group_id: str) -> None:
        self.resolver.check(actor, PermissionKeys.DELETE_GROUP)
        await self.repository.delete(group_id)
        logger.info("Group deleted", id=group_id, actor_id=actor.id)

    # ==================== Membership ====================

    async def _load_pair(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        """The group when both it and the user exist, None otherwise"""
        group = await self.repository.find_by_id(group_id)
        user = await self.users.find_by_id(user_id)
        if group is None or user is None:
            logger.debug("Group or user not found", group_id=group_id, user_id=user_id)
            return None
        return group

    async def add_member(self, actor: User, group_id: str, user_id: str) -> Optional[UserGroup]:
        self.resolver.check(actor, PermissionKeys.MANAGE_GROUP_MEMBERS)
        if await self._load_pair(group_id, user_id) is None:
            return None

        group = await self.repository.add_user(group_id, user_id)
        logger.info("Group member added", group_id=group_id, user_id=user_id, actor_id=actor.id)
        return group

    async def remove_member(self, actor: User, group_id: str, user_id: str) -> Optional[UserGroup]:
        self.resolver.check(actor, PermissionKeys.MANAGE_GROUP_MEMBERS)
        if await self._load_pair(group_id, user_id) is None:
            return None

        group = await self.repository.remove_user(group_id, user_id)
        logger.info("Group member removed", group_id=group_id, user_id=user_id, actor_id=actor.id)
        return group

    async def add_responsible(self, actor: User, group_id: str, user_id: str) -> Optional[UserGroup]:
        self.resolver.check(actor, PermissionKeys.MANAGE_GROUP_RESPONSIBLES)
        if await self._load_pair(group_id, user_id) is None:
            return None

        group = await self.repository.add_responsible(group_id, user_id)
        logger.info("Group responsible added", group_id=group_id, user_id=user_id, actor_id=actor.id)
        return group

    async def remove_responsible(self, actor: User, group_id: str, user_id: str) -> Optional[UserGroup]:
        self.resolver.check(actor, PermissionKeys.MANAGE_GROUP_RESPONSIBLES)
        group = await self._load_pair(group_id, user_id)
        if group is None:
            return None
        if group.responsible_ids == [user_id]:
            logger.warning("Refusing to remove last group responsible", group_id=group_id, user_id=user_id)
            raise LastResponsibleError(group_id, user_id)

        group = await self.repository.remove_responsible(group_id, user_id)
        logger.info("Group responsible removed", group_id=group_id, user_id=user_id, actor_id=actor.id)
        return group

    async def list_members(
        self,
        actor: User,
        group_id: str,
        params: ListParams,
        filters: Optional[UserFilters] = None,
    ) -> Page[User]:
        self.resolver.check(actor, PermissionKeys.READ_GROUP)
        return await self.repository.list_members(group_id, params, filters)

    async def list_responsibles(
        self,
        actor: User,
        group_id: str,
        params: ListParams,
        filters: Optional[UserFilters] = None,
    ) -> Page[User]:
        self.resolver.check(actor, PermissionKeys.READ_GROUP)
        return await self.repository.list_responsibles(group_id, params, filters)
