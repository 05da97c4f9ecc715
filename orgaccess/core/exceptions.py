"""
Domain error taxonomy.

Not-found conditions are not exceptions: services return ``None`` for them.
"""

from typing import Optional


class OrgAccessError(Exception):
    """Base class for every error raised by the core"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(OrgAccessError):
    """Raised when the acting user does not hold the required permission key"""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class DomainError(OrgAccessError):
    """A request the domain rules refuse"""
    pass


class DependencyConflictError(DomainError):
    """Deletion blocked because other records still reference the entity"""

    def __init__(self, message: str, *, entity: str, entity_id: str, dependents: int = 0):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id
        self.dependents = dependents


class HierarchyCycleError(DomainError):
    """Parent assignment that would make a department its own ancestor"""

    def __init__(self, department_id: str, parent_id: str):
        super().__init__("Department hierarchy cannot contain cycles")
        self.department_id = department_id
        self.parent_id = parent_id


class DuplicateEntityError(DomainError):
    """Unique attribute already taken by another record"""
    pass


class LastResponsibleError(DomainError):
    """Removal that would leave a group without any responsible"""

    def __init__(self, group_id: str, user_id: str):
        super().__init__("Group must keep at least one responsible")
        self.group_id = group_id
        self.user_id = user_id


class RepositoryError(OrgAccessError):
    """Persistence failure reported by a repository adapter"""
    pass


class EntityNotFoundError(RepositoryError):
    """Repository write addressed a record that does not exist"""

    def __init__(self, entity: str, entity_id: Optional[str]):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
