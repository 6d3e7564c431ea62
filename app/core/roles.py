"""
Role catalog and permission matrix

Role ids are fixed so they match the rows created by scripts/seed_roles.py.
"""
import enum
from typing import Dict, Iterable, Optional


class RoleName(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    SELLER = "SELLER"
    CUSTOMER = "CUSTOMER"


ROLE_IDS: Dict[RoleName, int] = {
    RoleName.SUPER_ADMIN: 1,
    RoleName.ADMIN: 2,
    RoleName.SELLER: 3,
    RoleName.CUSTOMER: 4,
}

ROLE_NAMES: Dict[int, RoleName] = {role_id: name for name, role_id in ROLE_IDS.items()}

PERMISSIONS = (
    "can_manage_users",
    "can_manage_products",
    "can_manage_orders",
    "can_manage_roles",
    "can_view_analytics",
    "can_manage_settings",
)

ROLE_PERMISSIONS: Dict[int, Dict[str, bool]] = {
    ROLE_IDS[RoleName.SUPER_ADMIN]: {
        "can_manage_users": True,
        "can_manage_products": True,
        "can_manage_orders": True,
        "can_manage_roles": True,
        "can_view_analytics": True,
        "can_manage_settings": True,
    },
    ROLE_IDS[RoleName.ADMIN]: {
        "can_manage_users": True,
        "can_manage_products": True,
        "can_manage_orders": True,
        "can_manage_roles": False,
        "can_view_analytics": True,
        "can_manage_settings": True,
    },
    ROLE_IDS[RoleName.SELLER]: {
        "can_manage_users": False,
        "can_manage_products": True,
        "can_manage_orders": True,
        "can_manage_roles": False,
        "can_view_analytics": True,
        "can_manage_settings": False,
    },
    ROLE_IDS[RoleName.CUSTOMER]: {
        "can_manage_users": False,
        "can_manage_products": False,
        "can_manage_orders": False,
        "can_manage_roles": False,
        "can_view_analytics": False,
        "can_manage_settings": False,
    },
}

# Role groups used by the route guards
SELLER_ROLES = (RoleName.SELLER, RoleName.ADMIN, RoleName.SUPER_ADMIN)
ADMIN_ROLES = (RoleName.ADMIN, RoleName.SUPER_ADMIN)
SUPER_ADMIN_ROLES = (RoleName.SUPER_ADMIN,)


def get_role_name(role_id: int) -> Optional[RoleName]:
    return ROLE_NAMES.get(role_id)


def get_role_id(role_name) -> Optional[int]:
    try:
        return ROLE_IDS.get(RoleName(role_name))
    except ValueError:
        return None


def has_permission(role_id: int, permission: str) -> bool:
    """True if the role grants the permission; unknown roles/permissions grant nothing"""
    return ROLE_PERMISSIONS.get(role_id, {}).get(permission, False)


def permissions_for_roles(roles: Iterable) -> Dict[str, bool]:
    """Union of the permission flags granted by any of the roles"""
    role_ids = [get_role_id(role) for role in roles]
    return {
        permission: any(has_permission(role_id, permission) for role_id in role_ids if role_id)
        for permission in PERMISSIONS
    }
