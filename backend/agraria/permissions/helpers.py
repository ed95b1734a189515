# Overview: Lookups over the permission definitions and the catalog shown to clients.

from .categories import ALL_CATEGORIES
from .definitions import PERMISSION_DEFINITIONS


_BY_CODE = {perm[0]: perm for perm in PERMISSION_DEFINITIONS}


def get_all_permission_codes():
    """Every permission code, in definition order."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]


def get_permissions_by_category(category):
    return [perm for perm in PERMISSION_DEFINITIONS if perm[3] == category]


def get_permission_definition(code):
    """Definition for a code as a dict, or None when the code is unknown."""
    perm = _BY_CODE.get(code)
    if perm is None:
        return None
    code, name, description, category = perm
    return {"code": code, "name": name, "description": description, "category": category}


def validate_permission_code(code):
    return code in _BY_CODE


def permission_catalog(granted):
    """
    Permission definitions grouped by category (display order), each marked
    with whether it is in `granted`.
    """
    catalog = {}
    for category in ALL_CATEGORIES:
        entries = []
        for perm in get_permissions_by_category(category):
            definition = get_permission_definition(perm[0])
            definition["granted"] = perm[0] in granted
            entries.append(definition)
        catalog[category] = entries
    return catalog
