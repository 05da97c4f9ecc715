"""
Shared fixtures for the orgaccess test suite.
"""

import pytest

from orgaccess.core.logging import setup_logging
from orgaccess.core.rbac import PermissionKeys
from orgaccess.repositories.memory import (
    InMemoryDepartmentRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemorySiteRepository,
    InMemoryUserGroupRepository,
    InMemoryUserRepository,
)

from tests.factories import FIXED_NOW, make_user


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_logging()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def root_user():
    return make_user(PermissionKeys.ROOT, user_id="root-user", department_id=None)


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def department_repository():
    return InMemoryDepartmentRepository()


@pytest.fixture
def site_repository():
    return InMemorySiteRepository()


@pytest.fixture
def permission_repository():
    return InMemoryPermissionRepository()


@pytest.fixture
def role_repository():
    return InMemoryRoleRepository()


@pytest.fixture
def group_repository(user_repository):
    return InMemoryUserGroupRepository(user_repository)
