"""
Site Service
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

import structlog

from orgaccess.core.exceptions import DependencyConflictError, EntityNotFoundError
from orgaccess.core.pagination import ListParams, Page
from orgaccess.core.permission_resolver import PermissionResolver, permission_resolver
from orgaccess.core.rbac import PermissionKeys
from orgaccess.repositories.base import DepartmentRepository, SiteRepository, UserRepository
from orgaccess.schemas.base import creation_stamp, merge_changes, update_stamp, utcnow
from orgaccess.schemas.site import Site, SiteCreate, SiteFilters, SiteUpdate
from orgaccess.schemas.user import User

logger = structlog.get_logger()

SITE_HAS_USERS_DETAIL = "Site has attached users"
SITE_HAS_DEPARTMENTS_DETAIL = "Site has attached departments"


class SiteService:
    def __init__(
        self,
        sites: SiteRepository,
        users: UserRepository,
        departments: DepartmentRepository,
        resolver: PermissionResolver = permission_resolver,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = sites
        self.users = users
        self.departments = departments
        self.resolver = resolver
        self.clock = clock

    async def create_site(self, actor: User, site_in: SiteCreate) -> Site:
        self.resolver.check(actor, PermissionKeys.MANAGE_SITES)

        site = Site(id=str(uuid4()), label=site_in.label, **creation_stamp(actor.id, self.clock()))
        created = await self.repository.create(site)
        logger.info("Site created", id=created.id, label=created.label, actor_id=actor.id)
        return created

    async def get_site(self, actor: User, site_id: str) -> Optional[Site]:
        self.resolver.check(actor, PermissionKeys.READ_SITE)
        return await self.repository.find_by_id(site_id)

    async def list_sites(
        self,
        actor: User,
        params: ListParams,
        filters: Optional[SiteFilters] = None,
    ) -> Page[Site]:
        self.resolver.check(actor, PermissionKeys.READ_SITES)
        return await self.repository.find_page(params, filters)

    async def update_site(self, actor: User, site_id: str, site_in: SiteUpdate) -> Site:
        self.resolver.check(actor, PermissionKeys.MANAGE_SITES)

        site = await self.repository.find_by_id(site_id)
        if site is None:
            raise EntityNotFoundError("Site", site_id)

        updated = merge_changes(site, {**site_in.changes(), **update_stamp(actor.id, self.clock())})
        saved = await self.repository.update(updated)
        logger.info("Site updated", id=site_id, actor_id=actor.id)
        return saved

    async def delete_site(self, actor: User, site_id: str) -> None:
        """Delete a site no user and no department references; users are checked first"""
        self.resolver.check(actor, PermissionKeys.MANAGE_SITES)

        users = await self.users.find_by_site_id(site_id)
        if users:
            logger.warning("Site deletion blocked by users", id=site_id, users=len(users))
            raise DependencyConflictError(
                SITE_HAS_USERS_DETAIL, entity="Site", entity_id=site_id, dependents=len(users)
            )

        departments = await self.departments.find_by_site_id(site_id)
        if departments:
            logger.warning("Site deletion blocked by departments", id=site_id, departments=len(departments))
            raise DependencyConflictError(
                SITE_HAS_DEPARTMENTS_DETAIL, entity="Site", entity_id=site_id, dependents=len(departments)
            )

        await self.repository.delete(site_id)
        logger.info("Site deleted", id=site_id, actor_id=actor.id)
