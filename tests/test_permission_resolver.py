"""
Tests for permission resolution precedence.
"""

import pytest

from orgaccess.core.exceptions import AuthorizationError
from orgaccess.core.permission_resolver import AssignmentPermissionResolver, permission_resolver
from orgaccess.core.rbac import PermissionKeys
from orgaccess.schemas.role import Role, RolePermissionAssignment
from orgaccess.schemas.user import UserPermissionAssignment

from tests.factories import make_user, permission, role_with


@pytest.fixture
def resolver():
    return AssignmentPermissionResolver()


class TestDirectAssignments:
    def test_direct_root_grants_any_key(self, resolver):
        user = make_user(PermissionKeys.ROOT)

        assert resolver.has(user, PermissionKeys.CREATE_DEPARTMENT)
        assert resolver.has(user, "some-unlisted-key")

    def test_direct_key_grants_that_key_only(self, resolver):
        user = make_user(PermissionKeys.READ_USERS)

        assert resolver.has(user, PermissionKeys.READ_USERS)
        assert not resolver.has(user, PermissionKeys.CREATE_DEPARTMENT)

    def test_plain_string_key_matches_enum_member(self, resolver):
        user = make_user(PermissionKeys.DELETE_GROUP)

        assert resolver.has(user, "delete-group")

    def test_direct_grant_wins_regardless_of_roles(self, resolver):
        user = make_user(PermissionKeys.UPDATE_GROUP, roles=[role_with(PermissionKeys.READ_USERS)])

        assert resolver.has(user, PermissionKeys.UPDATE_GROUP)

    def test_key_comparison_is_exact(self, resolver):
        user = make_user("read-department")

        assert not resolver.has(user, "read-departments")
        assert not resolver.has(user, "READ-DEPARTMENT")

    def test_padded_keys_do_not_match(self, resolver):
        user = make_user(PermissionKeys.READ_USERS)

        assert not resolver.has(user, " read-users")
        assert not resolver.has(user, "read-users ")


class TestRoleAssignments:
    def test_role_key_grants(self, resolver):
        user = make_user(roles=[role_with(PermissionKeys.MANAGE_GROUP_MEMBERS)])

        assert resolver.has(user, PermissionKeys.MANAGE_GROUP_MEMBERS)

    def test_role_root_grants_any_key(self, resolver):
        user = make_user(roles=[role_with(PermissionKeys.READ_USERS), role_with(PermissionKeys.ROOT)])

        assert resolver.has(user, PermissionKeys.DELETE_DEPARTMENT)

    def test_role_without_match_denies(self, resolver):
        user = make_user(roles=[role_with(PermissionKeys.READ_USERS)])

        assert not resolver.has(user, PermissionKeys.DELETE_DEPARTMENT)


class TestDenyAssignments:
    def test_deny_alone_never_grants(self, resolver):
        user = make_user(denied=[PermissionKeys.CREATE_DEPARTMENT])

        assert not resolver.has(user, PermissionKeys.CREATE_DEPARTMENT)

    def test_denied_root_does_not_act_as_wildcard(self, resolver):
        user = make_user(denied=[PermissionKeys.ROOT])

        assert not resolver.has(user, PermissionKeys.READ_USERS)
        assert not resolver.has(user, PermissionKeys.ROOT)

    def test_deny_entry_does_not_block_role_grant(self, resolver):
        user = make_user(
            denied=[PermissionKeys.CREATE_GROUP],
            roles=[role_with(PermissionKeys.CREATE_GROUP)],
        )

        assert resolver.has(user, PermissionKeys.CREATE_GROUP)

    def test_deny_entry_does_not_block_other_direct_grant(self, resolver):
        user = make_user(PermissionKeys.READ_GROUP, denied=[PermissionKeys.DELETE_GROUP])

        assert resolver.has(user, PermissionKeys.READ_GROUP)
        assert not resolver.has(user, PermissionKeys.DELETE_GROUP)

    def test_is_deny_reflects_effect(self):
        assert UserPermissionAssignment.deny(permission("x")).is_deny
        assert not UserPermissionAssignment.grant(permission("x")).is_deny


class TestScopedChecks:
    def test_unscoped_request_ignores_assignment_scope(self, resolver):
        user = make_user()
        user = user.model_copy(update={
            "permissions": [UserPermissionAssignment.grant(permission(PermissionKeys.READ_GROUP), scope_id="g-1")],
        })

        assert resolver.has(user, PermissionKeys.READ_GROUP)

    def test_scoped_request_accepts_global_and_matching_scope(self, resolver):
        user = make_user()
        user = user.model_copy(update={
            "permissions": [
                UserPermissionAssignment.grant(permission(PermissionKeys.READ_GROUP), scope_id="g-1"),
                UserPermissionAssignment.grant(permission(PermissionKeys.UPDATE_GROUP)),
            ],
        })

        assert resolver.has(user, PermissionKeys.READ_GROUP, scope_id="g-1")
        assert not resolver.has(user, PermissionKeys.READ_GROUP, scope_id="g-2")
        assert resolver.has(user, PermissionKeys.UPDATE_GROUP, scope_id="g-2")

    def test_scoped_role_assignment(self, resolver):
        role = Role(
            id="r-scoped",
            label="scoped",
            permissions=[RolePermissionAssignment(permission=permission(PermissionKeys.ROOT), scope_id="site-9")],
        )
        user = make_user(roles=[role])

        assert resolver.has(user, PermissionKeys.DELETE_DEPARTMENT, scope_id="site-9")
        assert not resolver.has(user, PermissionKeys.DELETE_DEPARTMENT, scope_id="site-1")


class TestCheck:
    def test_check_passes_silently(self):
        user = make_user(PermissionKeys.READ_USERS)

        assert permission_resolver.check(user, PermissionKeys.READ_USERS) is None

    def test_check_raises_generic_forbidden(self):
        user = make_user(PermissionKeys.READ_USERS)

        with pytest.raises(AuthorizationError) as exc_info:
            permission_resolver.check(user, PermissionKeys.CREATE_DEPARTMENT)

        assert str(exc_info.value) == "Forbidden"
        assert "create-department" not in str(exc_info.value)

    def test_check_reflects_changed_assignments(self):
        user = make_user(PermissionKeys.READ_USERS)
        permission_resolver.check(user, PermissionKeys.READ_USERS)

        revoked = user.model_copy(update={"permissions": []})

        with pytest.raises(AuthorizationError):
            permission_resolver.check(revoked, PermissionKeys.READ_USERS)
