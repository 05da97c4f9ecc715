"""
Department Service
Hierarchy, manager, permission and user attachment for departments.

Every operation authorizes the actor before touching a repository. Missing
targets of secondary lookups are reported as ``None``; at most one record is
written per call.
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

import structlog

from orgaccess.core.config import settings
from orgaccess.core.exceptions import DependencyConflictError, EntityNotFoundError, HierarchyCycleError
from orgaccess.core.pagination import ListParams, Page, all_of, equals_predicate, paginate, search_predicate
from orgaccess.core.permission_resolver import PermissionResolver, permission_resolver
from orgaccess.core.rbac import PermissionKeys
from orgaccess.repositories.base import DepartmentRepository, UserRepository
from orgaccess.schemas.base import creation_stamp, merge_changes, update_stamp, utcnow
from orgaccess.schemas.department import Department, DepartmentCreate, DepartmentFilters, DepartmentUpdate
from orgaccess.schemas.permission import Permission, PermissionFilters
from orgaccess.schemas.user import User, UserFilters

logger = structlog.get_logger()

DEPARTMENT_HAS_USERS_DETAIL = "Department has attached users"


class DepartmentService:
    """Service for department hierarchy and attachment management"""

    def __init__(
        self,
        departments: DepartmentRepository,
        users: UserRepository,
        resolver: PermissionResolver = permission_resolver,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = departments
        self.users = users
        self.resolver = resolver
        self.clock = clock

    async def _save(self, actor: User, department: Department, **changes) -> Department:
        updated = merge_changes(department, {**changes, **update_stamp(actor.id, self.clock())})
        return await self.repository.update(updated)

    # ==================== CRUD ====================

    async def create_department(self, actor: User, department_in: DepartmentCreate) -> Department:
        """Create a department stamped with the actor as creator and updater"""
        self.resolver.check(actor, PermissionKeys.CREATE_DEPARTMENT)

        department = Department(
            id=str(uuid4()),
            label=department_in.label,
            site_id=department_in.site_id,
            parent_department_id=department_in.parent_department_id,
            manager_user_id=department_in.manager_user_id,
            **creation_stamp(actor.id, self.clock()),
        )
        created = await self.repository.create(department)
        logger.info("Department created", id=created.id, label=created.label, actor_id=actor.id)
        return created

    async def get_department(self, actor: User, department_id: str) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENT)
        return await self.repository.find_by_id(department_id)

    async def list_departments(
        self,
        actor: User,
        params: ListParams,
        filters: Optional[DepartmentFilters] = None,
    ) -> Page[Department]:
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENTS)
        return await self.repository.find_page(params, filters)

    async def update_department(
        self,
        actor: User,
        department_id: str,
        department_in: DepartmentUpdate,
    ) -> Department:
        """
        Replace label, site and manager.

        A missing department raises EntityNotFoundError, the same
        repository error an adapter reports for an unknown row.
        """
        self.resolver.check(actor, PermissionKeys.UPDATE_DEPARTMENT)

        current = await self.repository.find_by_id(department_id)
        if current is None:
            raise EntityNotFoundError("Department", department_id)
        updated = await self._save(actor, current, **department_in.changes())
        logger.info("Department updated", id=department_id, actor_id=actor.id)
        return updated

    async def delete_department(self, actor: User, department_id: str) -> None:
        """Delete a department that no user references"""
        self.resolver.check(actor, PermissionKeys.DELETE_DEPARTMENT)

        attached = await self.users.find_by_department_id(department_id)
        if attached:
            logger.warning("Department deletion blocked", id=department_id, users=len(attached))
            raise DependencyConflictError(
                DEPARTMENT_HAS_USERS_DETAIL,
                entity="Department",
                entity_id=department_id,
                dependents=len(attached),
            )

        await self.repository.delete(department_id)
        logger.info("Department deleted", id=department_id, actor_id=actor.id)

    # ==================== Hierarchy ====================

    async def _ensure_acyclic(self, department_id: str, parent_id: str) -> None:
        """Walk the ancestors of ``parent_id`` looking for ``department_id``"""
        if not settings.ENFORCE_ACYCLIC_HIERARCHY:
            return
        if parent_id == department_id:
            raise HierarchyCycleError(department_id, parent_id)

        current = await self.repository.find_by_id(parent_id)
        depth = 0
        while current is not None and current.parent_department_id is not None:
            if current.parent_department_id == department_id:
                raise HierarchyCycleError(department_id, parent_id)
            depth += 1
            if depth > settings.MAX_HIERARCHY_DEPTH:
                logger.error("Hierarchy depth exceeded", department_id=department_id, parent_id=parent_id)
                raise HierarchyCycleError(department_id, parent_id)
            current = await self.repository.find_by_id(current.parent_department_id)

    async def add_child_department(self, actor: User, parent_id: str, child_id: str) -> Optional[Department]:
        """Attach ``child_id`` under ``parent_id``; returns the child"""
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_HIERARCHY)

        child = await self.repository.find_by_id(child_id)
        if child is None:
            return None

        await self._ensure_acyclic(child.id, parent_id)
        updated = await self._save(actor, child, parent_department_id=parent_id)
        logger.info("Department parent set", id=child.id, parent_id=parent_id, actor_id=actor.id)
        return updated

    async def remove_child_department(self, actor: User, parent_id: str, child_id: str) -> Optional[Department]:
        """
        Detach ``child_id`` from ``parent_id``.

        A child that is parent-less, or attached elsewhere, is returned
        unchanged without a write.
        """
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_HIERARCHY)

        child = await self.repository.find_by_id(child_id)
        if child is None:
            return None
        if child.parent_department_id != parent_id:
            return child

        updated = await self._save(actor, child, parent_department_id=None)
        logger.info("Department parent cleared", id=child.id, parent_id=parent_id, actor_id=actor.id)
        return updated

    async def set_parent_department(self, actor: User, department_id: str, parent_id: str) -> Optional[Department]:
        return await self.add_child_department(actor, parent_id, department_id)

    async def remove_parent_department(self, actor: User, department_id: str) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_HIERARCHY)

        department = await self.repository.find_by_id(department_id)
        if department is None:
            return None
        if department.parent_department_id is None:
            return department

        updated = await self._save(actor, department, parent_department_id=None)
        logger.info("Department parent cleared", id=department_id, actor_id=actor.id)
        return updated

    async def get_parent(self, actor: User, department_id: str) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENT)

        department = await self.repository.find_by_id(department_id)
        if department is None or department.parent_department_id is None:
            return None
        return await self.repository.find_by_id(department.parent_department_id)

    async def get_children(
        self,
        actor: User,
        department_id: str,
        params: ListParams,
        filters: Optional[DepartmentFilters] = None,
    ) -> Page[Department]:
        """Direct children of a department, filtered then paginated"""
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENT)

        filters = filters or DepartmentFilters()
        departments = await self.repository.find_all()
        return paginate(
            departments,
            params,
            all_of(
                equals_predicate("parent_department_id", department_id),
                equals_predicate("site_id", filters.site_id),
                search_predicate(filters.search, "label"),
            ),
        )

    # ==================== Manager ====================

    async def set_manager(self, actor: User, department_id: str, user_id: str) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_USERS)

        department = await self.repository.find_by_id(department_id)
        if department is None:
            return None

        updated = await self._save(actor, department, manager_user_id=user_id)
        logger.info("Department manager set", id=department_id, manager_user_id=user_id, actor_id=actor.id)
        return updated

    async def remove_manager(self, actor: User, department_id: str) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_USERS)

        department = await self.repository.find_by_id(department_id)
        if department is None:
            return None
        if department.manager_user_id is None:
            return department

        updated = await self._save(actor, department, manager_user_id=None)
        logger.info("Department manager cleared", id=department_id, actor_id=actor.id)
        return updated

    async def get_manager(self, actor: User, department_id: str) -> Optional[User]:
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENT)

        department = await self.repository.find_by_id(department_id)
        if department is None or department.manager_user_id is None:
            return None
        return await self.users.find_by_id(department.manager_user_id)

    # ==================== Permissions ====================

    async def add_permission(self, actor: User, department_id: str, permission: Permission) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_PERMISSIONS)

        department = await self.repository.find_by_id(department_id)
        if department is None:
            return None
        if department.has_permission(permission.id):
            return department

        updated = await self._save(actor, department, permissions=[*department.permissions, permission])
        logger.info(
            "Department permission added",
            id=department_id,
            permission_id=permission.id,
            actor_id=actor.id,
        )
        return updated

    async def remove_permission(self, actor: User, department_id: str, permission_id: str) -> Optional[Department]:
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_PERMISSIONS)

        department = await self.repository.find_by_id(department_id)
        if department is None:
            return None

        if not department.has_permission(permission_id):
            return department

        remaining = [p for p in department.permissions if p.id != permission_id]
        updated = await self._save(actor, department, permissions=remaining)
        logger.info(
            "Department permission removed",
            id=department_id,
            permission_id=permission_id,
            actor_id=actor.id,
        )
        return updated

    async def get_permissions(
        self,
        actor: User,
        department_id: str,
        params: ListParams,
        filters: Optional[PermissionFilters] = None,
    ) -> Page[Permission]:
        """Attached permissions; an unknown department yields an empty page"""
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENT)

        department = await self.repository.find_by_id(department_id)
        if department is None:
            return Page.empty(params)

        search = filters.search if filters else None
        return paginate(
            department.permissions,
            params,
            search_predicate(search, "permission_key", "description"),
        )

    # ==================== Users ====================

    async def add_user(self, actor: User, department_id: str, user_id: str) -> Optional[User]:
        """Move a user into the department; the user record is the one written"""
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_USERS)

        user = await self.users.find_by_id(user_id)
        department = await self.repository.find_by_id(department_id)
        if user is None or department is None:
            return None

        updated = await self.users.update(user.model_copy(update={"department_id": department.id}))
        logger.info("User assigned to department", user_id=user_id, department_id=department_id, actor_id=actor.id)
        return updated

    async def remove_user(self, actor: User, user_id: str) -> Optional[User]:
        self.resolver.check(actor, PermissionKeys.MANAGE_DEPARTMENT_USERS)

        user = await self.users.find_by_id(user_id)
        if user is None:
            return None

        updated = await self.users.update(user.model_copy(update={"department_id": None}))
        logger.info(
            "User removed from department",
            user_id=user_id,
            department_id=user.department_id,
            actor_id=actor.id,
        )
        return updated

    async def get_users(
        self,
        actor: User,
        department_id: str,
        params: ListParams,
        filters: Optional[UserFilters] = None,
    ) -> Page[User]:
        self.resolver.check(actor, PermissionKeys.READ_DEPARTMENT)

        scoped = (filters or UserFilters()).model_copy(update={"department_id": department_id})
        return await self.users.find_page(params, scoped)
