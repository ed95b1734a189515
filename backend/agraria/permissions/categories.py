# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    GENERAL = "GENERAL"
    USERS = "USERS"
    ENVIRONMENTS = "ENVIRONMENTS"
    ACTIVITIES = "ACTIVITIES"
    SALES = "SALES"
    INVENTORY = "INVENTORY"


# Display order
ALL_CATEGORIES = [
    PermissionCategory.GENERAL,
    PermissionCategory.USERS,
    PermissionCategory.ENVIRONMENTS,
    PermissionCategory.ACTIVITIES,
    PermissionCategory.SALES,
    PermissionCategory.INVENTORY,
]
