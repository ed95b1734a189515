# Overview: Permission system package.
# Re-exports all public APIs for short imports.

from .categories import ALL_CATEGORIES, PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    GENERAL_PERMISSIONS,
    USER_PERMISSIONS,
    ENVIRONMENT_PERMISSIONS,
    ACTIVITY_PERMISSIONS,
    SALES_PERMISSIONS,
    INVENTORY_PERMISSIONS,
)
from .roles import Role, TeacherKind, ROLE_LABELS, teacher_role_for
from .matrix import (
    ROLE_PERMISSIONS,
    PAGES,
    permissions_for,
    role_has_permission,
    visible_pages,
    page_permission,
)
from .helpers import (
    get_all_permission_codes,
    get_permissions_by_category,
    get_permission_definition,
    validate_permission_code,
    permission_catalog,
)

__all__ = [
    "PermissionCategory",
    "ALL_CATEGORIES",
    "PERMISSION_DEFINITIONS",
    "GENERAL_PERMISSIONS",
    "USER_PERMISSIONS",
    "ENVIRONMENT_PERMISSIONS",
    "ACTIVITY_PERMISSIONS",
    "SALES_PERMISSIONS",
    "INVENTORY_PERMISSIONS",
    "Role",
    "TeacherKind",
    "ROLE_LABELS",
    "teacher_role_for",
    "ROLE_PERMISSIONS",
    "PAGES",
    "permissions_for",
    "role_has_permission",
    "visible_pages",
    "page_permission",
    "get_all_permission_codes",
    "get_permissions_by_category",
    "get_permission_definition",
    "validate_permission_code",
    "permission_catalog",
]
