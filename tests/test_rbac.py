import pytest

from relief_api.core.rbac import (
    Identity,
    Permission,
    UserRole,
    UserStatus,
    get_user_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_supreme_role,
    normalize_permissions,
)


def make_identity(role: UserRole, *permissions: Permission) -> Identity:
    return Identity(id=1, role=role, status=UserStatus.ACTIVE, permissions=frozenset(permissions))


class TestSupremeRole:
    def test_only_admin_is_supreme(self):
        assert is_supreme_role(UserRole.ADMIN)
        assert not is_supreme_role(UserRole.SYSTEM_ADMINISTRATOR)
        assert not is_supreme_role(UserRole.VOLUNTEER_CLUB)
        assert not is_supreme_role(UserRole.USER)

    @pytest.mark.parametrize("permission", list(Permission))
    def test_admin_passes_every_check_without_explicit_permissions(self, permission):
        admin = make_identity(UserRole.ADMIN)

        assert has_permission(admin, permission)
        assert has_any_permission(admin, [permission])
        assert has_all_permissions(admin, [permission])

    def test_admin_passes_empty_lists(self):
        admin = make_identity(UserRole.ADMIN)

        assert has_any_permission(admin, [])
        assert has_all_permissions(admin, [])


class TestSystemAdministrator:
    def test_has_permission_uses_explicit_set(self):
        identity = make_identity(UserRole.SYSTEM_ADMINISTRATOR, Permission.VIEW_AUDIT_LOGS)

        assert has_permission(identity, Permission.VIEW_AUDIT_LOGS)
        assert not has_permission(identity, Permission.EXPORT_AUDIT_LOGS)

    def test_any_and_all(self):
        identity = make_identity(
            UserRole.SYSTEM_ADMINISTRATOR,
            Permission.VIEW_AUDIT_LOGS,
            Permission.MANAGE_ADMINS,
        )

        assert has_any_permission(identity, [Permission.EXPORT_AUDIT_LOGS, Permission.MANAGE_ADMINS])
        assert not has_any_permission(identity, [Permission.EXPORT_AUDIT_LOGS, Permission.MODERATE_CONTENT])
        assert has_all_permissions(identity, [Permission.VIEW_AUDIT_LOGS, Permission.MANAGE_ADMINS])
        assert not has_all_permissions(identity, [Permission.VIEW_AUDIT_LOGS, Permission.EXPORT_AUDIT_LOGS])

    def test_empty_lists_deny(self):
        identity = make_identity(UserRole.SYSTEM_ADMINISTRATOR, *Permission)

        assert not has_any_permission(identity, [])
        assert not has_all_permissions(identity, [])


class TestOtherRoles:
    @pytest.mark.parametrize("role", [UserRole.VOLUNTEER_CLUB, UserRole.USER])
    def test_permissions_on_other_roles_are_never_consulted(self, role):
        identity = make_identity(role, *Permission)

        for permission in Permission:
            assert not has_permission(identity, permission)
        assert not has_any_permission(identity, list(Permission))
        assert not has_all_permissions(identity, list(Permission))
        assert get_user_permissions(identity) == []

    def test_missing_identity_is_denied(self):
        assert not has_permission(None, Permission.VIEW_USERS)
        assert not has_any_permission(None, [Permission.VIEW_USERS])
        assert not has_all_permissions(None, [Permission.VIEW_USERS])
        assert get_user_permissions(None) == []


class TestGetUserPermissions:
    def test_admin_has_no_enumerated_permissions(self):
        assert get_user_permissions(make_identity(UserRole.ADMIN)) == []

    def test_system_administrator_permissions_in_canonical_order(self):
        identity = make_identity(
            UserRole.SYSTEM_ADMINISTRATOR,
            Permission.MODERATE_CONTENT,
            Permission.MANAGE_USERS,
        )

        assert get_user_permissions(identity) == [Permission.MANAGE_USERS, Permission.MODERATE_CONTENT]


class TestNormalizePermissions:
    def test_removes_duplicates_keeping_first_seen_order(self):
        result = normalize_permissions(["VIEW_AUDIT_LOGS", "MANAGE_ADMINS", "VIEW_AUDIT_LOGS"])

        assert result == [Permission.VIEW_AUDIT_LOGS, Permission.MANAGE_ADMINS]

    def test_accepts_enum_members(self):
        assert normalize_permissions([Permission.VIEW_USERS]) == [Permission.VIEW_USERS]

    def test_rejects_unknown_tokens(self):
        with pytest.raises(ValueError) as exc_info:
            normalize_permissions(["VIEW_USERS", "FLY", "TELEPORT"])

        assert "FLY" in str(exc_info.value)
        assert "TELEPORT" in str(exc_info.value)

    def test_empty_input(self):
        assert normalize_permissions([]) == []
