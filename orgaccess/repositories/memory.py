"""
In-Memory Repositories
Dict-backed adapters for every port, insertion ordered. Used by the test
suite and by single-process hosts that have no database.
"""

from typing import Dict, Generic, Iterable, List, Optional

import structlog

from orgaccess.core.exceptions import EntityNotFoundError
from orgaccess.core.pagination import ListParams, Page, Predicate, all_of, equals_predicate, paginate, search_predicate
from orgaccess.repositories.base import (
    DepartmentRepository,
    FiltersType,
    ModelType,
    PermissionRepository,
    RoleRepository,
    SiteRepository,
    UserGroupRepository,
    UserRepository,
)
from orgaccess.schemas.department import Department, DepartmentFilters
from orgaccess.schemas.permission import Permission, PermissionFilters
from orgaccess.schemas.role import Role, RoleFilters
from orgaccess.schemas.site import Site, SiteFilters
from orgaccess.schemas.user import User, UserFilters
from orgaccess.schemas.user_group import UserGroup, UserGroupFilters

logger = structlog.get_logger()


class InMemoryCRUD(Generic[ModelType, FiltersType]):
    """
    Generic dict-backed CRUD operations
    """

    entity_name = "Record"

    def __init__(self, records: Optional[Iterable[ModelType]] = None):
        self._records: Dict[str, ModelType] = {}
        for record in records or []:
            self._records[record.id] = record

    def _predicate(self, filters: Optional[FiltersType]) -> Optional[Predicate]:
        return None

    async def find_by_id(self, id: str) -> Optional[ModelType]:
        record = self._records.get(id)
        if record is None:
            logger.debug("Record not found", model=self.entity_name, id=id)
        return record

    async def find_all(self) -> List[ModelType]:
        return list(self._records.values())

    async def find_page(self, params: ListParams, filters: Optional[FiltersType] = None) -> Page[ModelType]:
        page = paginate(self._records.values(), params, self._predicate(filters))
        logger.debug(
            "Page retrieved",
            model=self.entity_name,
            page=params.page,
            limit=params.limit,
            total=page.total,
        )
        return page

    async def create(self, obj: ModelType) -> ModelType:
        self._records[obj.id] = obj
        logger.info("Record created", model=self.entity_name, id=obj.id)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        if obj.id not in self._records:
            logger.error("Record not found for update", model=self.entity_name, id=obj.id)
            raise EntityNotFoundError(self.entity_name, obj.id)
        self._records[obj.id] = obj
        logger.info("Record updated", model=self.entity_name, id=obj.id)
        return obj

    async def delete(self, id: str) -> None:
        if self._records.pop(id, None) is None:
            logger.warning("Record not found for deletion", model=self.entity_name, id=id)
            raise EntityNotFoundError(self.entity_name, id)
        logger.info("Record deleted", model=self.entity_name, id=id)


class InMemoryDepartmentRepository(InMemoryCRUD[Department, DepartmentFilters], DepartmentRepository):
    entity_name = "Department"

    def _predicate(self, filters: Optional[DepartmentFilters]) -> Optional[Predicate]:
        if filters is None:
            return None
        return all_of(
            search_predicate(filters.search, "label"),
            equals_predicate("site_id", filters.site_id),
        )

    async def find_by_label(self, label: str) -> Optional[Department]:
        return next((d for d in self._records.values() if d.label == label), None)

    async def find_by_site_id(self, site_id: str) -> List[Department]:
        return [d for d in self._records.values() if d.site_id == site_id]


class InMemorySiteRepository(InMemoryCRUD[Site, SiteFilters], SiteRepository):
    entity_name = "Site"

    def _predicate(self, filters: Optional[SiteFilters]) -> Optional[Predicate]:
        if filters is None:
            return None
        return search_predicate(filters.search, "label")

    async def find_by_label(self, label: str) -> Optional[Site]:
        return next((s for s in self._records.values() if s.label == label), None)


class InMemoryPermissionRepository(InMemoryCRUD[Permission, PermissionFilters], PermissionRepository):
    entity_name = "Permission"

    def _predicate(self, filters: Optional[PermissionFilters]) -> Optional[Predicate]:
        if filters is None:
            return None
        return search_predicate(filters.search, "permission_key", "description")

    async def find_by_key(self, permission_key: str) -> Optional[Permission]:
        return next((p for p in self._records.values() if p.permission_key == permission_key), None)


class InMemoryRoleRepository(InMemoryCRUD[Role, RoleFilters], RoleRepository):
    entity_name = "Role"

    def _predicate(self, filters: Optional[RoleFilters]) -> Optional[Predicate]:
        if filters is None:
            return None
        return search_predicate(filters.search, "label")

    async def find_by_label(self, label: str) -> Optional[Role]:
        return next((r for r in self._records.values() if r.label == label), None)


def user_predicate(filters: Optional[UserFilters]) -> Optional[Predicate]:
    if filters is None:
        return None
    return all_of(
        search_predicate(filters.search, "display_name"),
        equals_predicate("department_id", filters.department_id),
        equals_predicate("site_id", filters.site_id),
        equals_predicate("status", filters.status),
    )


class InMemoryUserRepository(UserRepository):
    def __init__(self, users: Optional[Iterable[User]] = None):
        self._records: Dict[str, User] = {}
        for user in users or []:
            self._records[user.id] = user

    async def add(self, user: User) -> User:
        self._records[user.id] = user
        return user

    async def find_by_id(self, id: str) -> Optional[User]:
        return self._records.get(id)

    async def find_by_department_id(self, department_id: str) -> List[User]:
        return [u for u in self._records.values() if u.department_id == department_id]

    async def find_by_site_id(self, site_id: str) -> List[User]:
        return [u for u in self._records.values() if u.site_id == site_id]

    async def find_by_role_id(self, role_id: str) -> List[User]:
        return [u for u in self._records.values() if u.has_role(role_id)]

    async def find_page(self, params: ListParams, filters: Optional[UserFilters] = None) -> Page[User]:
        return paginate(self._records.values(), params, user_predicate(filters))

    async def update(self, user: User) -> User:
        if user.id not in self._records:
            raise EntityNotFoundError("User", user.id)
        self._records[user.id] = user
        logger.info("Record updated", model="User", id=user.id)
        return user


class InMemoryUserGroupRepository(InMemoryCRUD[UserGroup, UserGroupFilters], UserGroupRepository):
    """Membership lists live on the group record itself"""

    entity_name = "UserGroup"

    def __init__(self, users: UserRepository, records: Optional[Iterable[UserGroup]] = None):
        super().__init__(records)
        self._users = users

    def _predicate(self, filters: Optional[UserGroupFilters]) -> Optional[Predicate]:
        if filters is None:
            return None
        return search_predicate(filters.search, "name", "description")

    async def _replace_ids(self, group_id: str, field: str, user_id: str, present: bool) -> Optional[UserGroup]:
        group = self._records.get(group_id)
        if group is None:
            return None
        ids = [i for i in getattr(group, field) if i != user_id]
        if present:
            ids.append(user_id)
        updated = group.model_copy(update={field: ids})
        self._records[group_id] = updated
        logger.info("Group membership changed", group_id=group_id, user_id=user_id, field=field, present=present)
        return updated

    async def add_user(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        return await self._replace_ids(group_id, "member_ids", user_id, True)

    async def remove_user(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        return await self._replace_ids(group_id, "member_ids", user_id, False)

    async def add_responsible(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        return await self._replace_ids(group_id, "responsible_ids", user_id, True)

    async def remove_responsible(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        return await self._replace_ids(group_id, "responsible_ids", user_id, False)

    async def _list_users(
        self, ids: List[str], params: ListParams, filters: Optional[UserFilters]
    ) -> Page[User]:
        users = []
        for user_id in ids:
            user = await self._users.find_by_id(user_id)
            if user is not None:
                users.append(user)
        return paginate(users, params, user_predicate(filters))

    async def list_members(
        self, group_id: str, params: ListParams, filters: Optional[UserFilters] = None
    ) -> Page[User]:
        group = self._records.get(group_id)
        if group is None:
            return Page.empty(params)
        return await self._list_users(group.member_ids, params, filters)

    async def list_responsibles(
        self, group_id: str, params: ListParams, filters: Optional[UserFilters] = None
    ) -> Page[User]:
        group = self._records.get(group_id)
        if group is None:
            return Page.empty(params)
        return await self._list_users(group.responsible_ids, params, filters)
