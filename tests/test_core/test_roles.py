"""
Unit tests for the role catalog and permission matrix
"""
from app.core.roles import (
    RoleName,
    get_role_id,
    get_role_name,
    has_permission,
    permissions_for_roles,
    PERMISSIONS,
)


class TestRoles:

    def test_role_ids_are_fixed(self):
        assert get_role_id(RoleName.SUPER_ADMIN) == 1
        assert get_role_id("ADMIN") == 2
        assert get_role_id("SELLER") == 3
        assert get_role_id("CUSTOMER") == 4
        assert get_role_name(3) == RoleName.SELLER

    def test_unknown_role(self):
        assert get_role_id("OWNER") is None
        assert get_role_name(99) is None
        assert has_permission(99, "can_manage_users") is False

    def test_permission_matrix(self):
        assert has_permission(1, "can_manage_roles") is True
        assert has_permission(2, "can_manage_roles") is False
        assert has_permission(2, "can_manage_settings") is True
        assert has_permission(3, "can_manage_products") is True
        assert has_permission(3, "can_manage_users") is False
        assert not any(has_permission(4, permission) for permission in PERMISSIONS)
        assert has_permission(1, "can_fly") is False

    def test_permissions_for_roles_is_a_union(self):
        permissions = permissions_for_roles([RoleName.SELLER, RoleName.CUSTOMER])

        assert set(permissions) == set(PERMISSIONS)
        assert permissions["can_manage_orders"] is True
        assert permissions["can_manage_settings"] is False

    def test_no_roles_no_permissions(self):
        assert not any(permissions_for_roles([]).values())
