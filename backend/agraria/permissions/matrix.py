# Overview: The single role -> permission table and the page visibility derived from it.

"""
Role permission matrix.

WHY: One table decides what every role may see and do. Page guards, the
navigation menu and row-level filters all read from here, so adding a role
means adding one entry rather than hunting down string comparisons.
"""

from .definitions import PERMISSION_DEFINITIONS
from .roles import Role


ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.ADMINISTRATOR: frozenset(perm[0] for perm in PERMISSION_DEFINITIONS),
    # Area lead: sales in view-only mode, sales queries and inventory
    Role.AREA_LEAD: frozenset({
        "VIEW_DASHBOARD",
        "VIEW_SALES",
        "VIEW_INVENTORY",
        "RECORD_MOVEMENTS",
    }),
    # Teachers: only their own environments
    Role.ANIMAL_TEACHER: frozenset({
        "VIEW_DASHBOARD",
        "VIEW_ENVIRONMENTS",
    }),
    Role.PLANT_TEACHER: frozenset({
        "VIEW_DASHBOARD",
        "VIEW_ENVIRONMENTS",
    }),
    Role.STANDARD: frozenset({
        "VIEW_DASHBOARD",
        "VIEW_ENVIRONMENTS",
        "MANAGE_ENVIRONMENTS",
        "VIEW_ACTIVITIES",
        "REGISTER_ACTIVITIES",
        "VIEW_SALES",
        "REGISTER_SALES",
        "VIEW_INVENTORY",
        "RECORD_MOVEMENTS",
    }),
}


# Navigation pages in menu order: (page, label, required permission)
PAGES = [
    ("dashboard", "Dashboard", "VIEW_DASHBOARD"),
    ("usuarios", "Usuarios", "MANAGE_USERS"),
    ("entornos", "Entornos Formativos", "VIEW_ENVIRONMENTS"),
    ("actividades", "Actividades", "VIEW_ACTIVITIES"),
    ("consulta-actividades", "Consulta de Actividades", "VIEW_ACTIVITIES"),
    ("ventas", "Ventas", "VIEW_SALES"),
    ("consulta-ventas", "Consulta de Ventas", "VIEW_SALES"),
    ("inventario", "Inventario", "VIEW_INVENTORY"),
]


def _check_matrix() -> None:
    missing = [role.value for role in Role if role not in ROLE_PERMISSIONS]
    if missing:
        raise RuntimeError(f"ROLE_PERMISSIONS is missing roles: {', '.join(missing)}")

    known = {perm[0] for perm in PERMISSION_DEFINITIONS}
    for role, codes in ROLE_PERMISSIONS.items():
        unknown = codes - known
        if unknown:
            raise RuntimeError(f"Unknown permission codes for {role.value}: {', '.join(sorted(unknown))}")


_check_matrix()


def permissions_for(role: Role) -> frozenset[str]:
    return ROLE_PERMISSIONS[Role.parse(role)]


def role_has_permission(role: Role, permission_code: str) -> bool:
    return permission_code in permissions_for(role)


def visible_pages(role: Role) -> list[dict]:
    """Navigation entries the role may open, in menu order."""
    granted = permissions_for(role)
    return [
        {"page": page, "label": label}
        for page, label, required in PAGES
        if required in granted
    ]


def page_permission(page: str) -> str | None:
    for name, _label, required in PAGES:
        if name == page:
            return required
    return None
