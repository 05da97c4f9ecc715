"""
Tests for the in-memory repository adapters
"""

import pytest

from orgaccess.core.exceptions import EntityNotFoundError, RepositoryError
from orgaccess.core.pagination import ListParams
from orgaccess.schemas.department import DepartmentFilters
from orgaccess.schemas.user import UserFilters, UserStatus
from orgaccess.schemas.user_group import UserGroup

from tests.factories import make_department, make_user, role_with


class TestInMemoryCRUD:
    @pytest.mark.asyncio
    async def test_insertion_order_is_kept(self, department_repository):
        for department_id in ("z", "a", "m"):
            await department_repository.create(make_department(department_id))

        assert [d.id for d in await department_repository.find_all()] == ["z", "a", "m"]

    @pytest.mark.asyncio
    async def test_update_unknown_raises_not_found(self, department_repository):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await department_repository.update(make_department("ghost"))

        assert isinstance(exc_info.value, RepositoryError)
        assert exc_info.value.entity == "Department"

    @pytest.mark.asyncio
    async def test_find_page_with_filters(self, department_repository):
        await department_repository.create(make_department("d1", "Finance", site_id="s1"))
        await department_repository.create(make_department("d2", "Finance East", site_id="s2"))

        page = await department_repository.find_page(ListParams(), DepartmentFilters(search="finance", site_id="s2"))

        assert [d.id for d in page.items] == ["d2"]

    @pytest.mark.asyncio
    async def test_secondary_lookups(self, department_repository):
        await department_repository.create(make_department("d1", "Finance", site_id="s1"))

        assert (await department_repository.find_by_label("Finance")).id == "d1"
        assert await department_repository.find_by_label("finance") is None
        assert [d.id for d in await department_repository.find_by_site_id("s1")] == ["d1"]


class TestInMemoryUserRepository:
    @pytest.mark.asyncio
    async def test_lookups(self, user_repository):
        auditor = role_with(role_id="auditor")
        await user_repository.add(make_user(user_id="u1", department_id="d1", site_id="s1", roles=[auditor]))
        await user_repository.add(make_user(user_id="u2", department_id="d2", site_id="s1"))

        assert [u.id for u in await user_repository.find_by_department_id("d1")] == ["u1"]
        assert [u.id for u in await user_repository.find_by_site_id("s1")] == ["u1", "u2"]
        assert [u.id for u in await user_repository.find_by_role_id("auditor")] == ["u1"]

    @pytest.mark.asyncio
    async def test_status_filter(self, user_repository):
        await user_repository.add(make_user(user_id="u1"))
        suspended = make_user(user_id="u2").model_copy(update={"status": UserStatus.SUSPENDED})
        await user_repository.add(suspended)

        page = await user_repository.find_page(ListParams(), UserFilters(status=UserStatus.SUSPENDED))

        assert [u.id for u in page.items] == ["u2"]

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, user_repository):
        with pytest.raises(EntityNotFoundError):
            await user_repository.update(make_user(user_id="ghost"))


class TestInMemoryUserGroupRepository:
    @pytest.mark.asyncio
    async def test_membership_ops_on_missing_group(self, group_repository):
        assert await group_repository.add_user("nope", "u1") is None
        assert await group_repository.remove_responsible("nope", "u1") is None

    @pytest.mark.asyncio
    async def test_member_listing_skips_unknown_users(self, group_repository, user_repository):
        await user_repository.add(make_user(user_id="u1"))
        await group_repository.create(UserGroup(id="g1", name="g", member_ids=["u1", "gone"]))

        page = await group_repository.list_members("g1", ListParams())

        assert [u.id for u in page.items] == ["u1"]
        assert page.total == 1

    @pytest.mark.asyncio
    async def test_remove_absent_member_is_harmless(self, group_repository):
        await group_repository.create(UserGroup(id="g1", name="g", member_ids=["u1"]))

        group = await group_repository.remove_user("g1", "u2")

        assert group.member_ids == ["u1"]
