"""
Repository Ports
Abstract CRUD contracts consumed by the services. Persistence technology
is left to the adapters.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from orgaccess.core.pagination import ListParams, Page
from orgaccess.schemas.department import Department, DepartmentFilters
from orgaccess.schemas.permission import Permission, PermissionFilters
from orgaccess.schemas.role import Role, RoleFilters
from orgaccess.schemas.site import Site, SiteFilters
from orgaccess.schemas.user import User, UserFilters
from orgaccess.schemas.user_group import UserGroup, UserGroupFilters

ModelType = TypeVar("ModelType", bound=BaseModel)
FiltersType = TypeVar("FiltersType", bound=BaseModel)


class CRUDRepository(ABC, Generic[ModelType, FiltersType]):
    """
    Base CRUD port shared by every entity repository
    """

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[ModelType]:
        """
        Get a single record by ID

        Returns:
            Model instance or None
        """
        raise NotImplementedError

    @abstractmethod
    async def find_all(self) -> List[ModelType]:
        """All records, insertion ordered"""
        raise NotImplementedError

    @abstractmethod
    async def find_page(
        self,
        params: ListParams,
        filters: Optional[FiltersType] = None,
    ) -> Page[ModelType]:
        """
        Get one page of records matching ``filters``

        Args:
            params: Page number and size
            filters: Entity specific filters, None matches everything

        Returns:
            Page with the pre-slice total
        """
        raise NotImplementedError

    @abstractmethod
    async def create(self, obj: ModelType) -> ModelType:
        raise NotImplementedError

    @abstractmethod
    async def update(self, obj: ModelType) -> ModelType:
        """
        Replace a stored record

        Raises:
            RepositoryError: If the record cannot be written
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, id: str) -> None:
        raise NotImplementedError


class DepartmentRepository(CRUDRepository[Department, DepartmentFilters]):
    @abstractmethod
    async def find_by_label(self, label: str) -> Optional[Department]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_site_id(self, site_id: str) -> List[Department]:
        raise NotImplementedError


class SiteRepository(CRUDRepository[Site, SiteFilters]):
    @abstractmethod
    async def find_by_label(self, label: str) -> Optional[Site]:
        raise NotImplementedError


class PermissionRepository(CRUDRepository[Permission, PermissionFilters]):
    @abstractmethod
    async def find_by_key(self, permission_key: str) -> Optional[Permission]:
        raise NotImplementedError


class RoleRepository(CRUDRepository[Role, RoleFilters]):
    @abstractmethod
    async def find_by_label(self, label: str) -> Optional[Role]:
        raise NotImplementedError


class UserGroupRepository(CRUDRepository[UserGroup, UserGroupFilters]):
    """Owns the join-table semantics for members and responsibles"""

    @abstractmethod
    async def add_user(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        raise NotImplementedError

    @abstractmethod
    async def remove_user(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        raise NotImplementedError

    @abstractmethod
    async def add_responsible(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        raise NotImplementedError

    @abstractmethod
    async def remove_responsible(self, group_id: str, user_id: str) -> Optional[UserGroup]:
        raise NotImplementedError

    @abstractmethod
    async def list_members(
        self, group_id: str, params: ListParams, filters: Optional[UserFilters] = None
    ) -> Page[User]:
        raise NotImplementedError

    @abstractmethod
    async def list_responsibles(
        self, group_id: str, params: ListParams, filters: Optional[UserFilters] = None
    ) -> Page[User]:
        raise NotImplementedError


class UserRepository(ABC):
    """User lookups needed by the core; user lifecycle lives elsewhere"""

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_department_id(self, department_id: str) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_site_id(self, site_id: str) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_role_id(self, role_id: str) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_page(self, params: ListParams, filters: Optional[UserFilters] = None) -> Page[User]:
        raise NotImplementedError

    @abstractmethod
    async def update(self, user: User) -> User:
        raise NotImplementedError
