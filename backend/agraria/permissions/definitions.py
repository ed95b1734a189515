# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- GENERAL --

GENERAL_PERMISSIONS = [
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "View the dashboard and its aggregate counters",
        PermissionCategory.GENERAL,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "MANAGE_USERS",
        "Manage Users",
        "Create, edit, deactivate and delete user accounts",
        PermissionCategory.USERS,
    ),
]


# -- ENVIRONMENTS --

ENVIRONMENT_PERMISSIONS = [
    (
        "VIEW_ENVIRONMENTS",
        "View Environments",
        "List training environments (teachers see only their assigned ones)",
        PermissionCategory.ENVIRONMENTS,
    ),
    (
        "MANAGE_ENVIRONMENTS",
        "Manage Environments",
        "Create, edit and delete training environments",
        PermissionCategory.ENVIRONMENTS,
    ),
]


# -- ACTIVITIES --

ACTIVITY_PERMISSIONS = [
    (
        "VIEW_ACTIVITIES",
        "View Activities",
        "List, query and export logged activities",
        PermissionCategory.ACTIVITIES,
    ),
    (
        "REGISTER_ACTIVITIES",
        "Register Activities",
        "Log, edit and delete activities",
        PermissionCategory.ACTIVITIES,
    ),
]


# -- SALES --

SALES_PERMISSIONS = [
    (
        "VIEW_SALES",
        "View Sales",
        "List, query and export sales",
        PermissionCategory.SALES,
    ),
    (
        "REGISTER_SALES",
        "Register Sales",
        "Register new sales (point of sale)",
        PermissionCategory.SALES,
    ),
]


# -- INVENTORY --

INVENTORY_PERMISSIONS = [
    (
        "VIEW_INVENTORY",
        "View Inventory",
        "View products, stock levels and movements",
        PermissionCategory.INVENTORY,
    ),
    (
        "RECORD_MOVEMENTS",
        "Record Movements",
        "Record inbound, outbound and adjustment stock movements",
        PermissionCategory.INVENTORY,
    ),
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Add products, change prices and delete products",
        PermissionCategory.INVENTORY,
    ),
]


PERMISSION_DEFINITIONS = (
    GENERAL_PERMISSIONS
    + USER_PERMISSIONS
    + ENVIRONMENT_PERMISSIONS
    + ACTIVITY_PERMISSIONS
    + SALES_PERMISSIONS
    + INVENTORY_PERMISSIONS
)
