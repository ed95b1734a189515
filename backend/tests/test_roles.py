"""
Role predicate and permission table tests.

Every user holds exactly one of: administrator, area lead, animal teacher,
plant teacher, standard. Page visibility is derived from the same table.
"""

import pytest

from agraria.permissions import (
    PERMISSION_DEFINITIONS,
    ROLE_PERMISSIONS,
    Role,
    get_all_permission_codes,
    page_permission,
    permissions_for,
    role_has_permission,
    visible_pages,
)


class TestRolePredicates:

    @pytest.mark.parametrize(
        "username,expected",
        [
            ("admin", "is_admin"),
            ("jefe", "is_area_lead"),
            ("prof.animal", "is_animal_teacher"),
            ("prof.vegetal", "is_plant_teacher"),
            ("jgarcia", "is_standard"),
        ],
    )
    def test_exactly_one_role_predicate_holds(self, services, users, username, expected):
        user = users[username]
        predicates = ["is_admin", "is_area_lead", "is_animal_teacher", "is_plant_teacher", "is_standard"]

        held = [name for name in predicates if getattr(services.auth, name)(user)]
        assert held == [expected]

    def test_teacher_kind(self, services, users):
        assert services.auth.get_teacher_kind(users["prof.animal"]) == "animal"
        assert services.auth.get_teacher_kind(users["prof.vegetal"]) == "vegetal"
        assert services.auth.get_teacher_kind(users["admin"]) is None
        assert services.auth.is_teacher(users["prof.vegetal"])
        assert not services.auth.is_teacher(users["jefe"])

    def test_predicates_are_false_without_session(self, services, request_context):
        assert not services.auth.is_admin()
        assert not services.auth.is_standard()
        assert services.auth.get_teacher_kind() is None
        assert not services.auth.has_permission("VIEW_DASHBOARD")

    def test_predicates_use_logged_in_user(self, services, request_context):
        services.auth.login("prof.vegetal", "prof123")

        assert services.auth.is_plant_teacher()
        assert services.auth.get_teacher_kind() == "vegetal"


class TestRoleParsing:

    def test_unknown_role_reads_as_standard(self):
        assert Role.parse("superuser") is Role.STANDARD
        assert Role.parse(None) is Role.STANDARD
        assert not Role.is_known("superuser")

    def test_stored_values(self):
        assert {r.value for r in Role} == {
            "administrador",
            "jefe_area",
            "profesor_animal",
            "profesor_vegetal",
            "estandar",
        }


class TestPermissionTable:

    def test_every_role_has_an_entry(self):
        assert set(ROLE_PERMISSIONS) == set(Role)

    def test_admin_holds_every_permission(self):
        assert permissions_for(Role.ADMINISTRATOR) == frozenset(get_all_permission_codes())

    def test_codes_are_unique(self):
        codes = [perm[0] for perm in PERMISSION_DEFINITIONS]
        assert len(codes) == len(set(codes))

    @pytest.mark.parametrize(
        "role,code,granted",
        [
            (Role.AREA_LEAD, "VIEW_SALES", True),
            (Role.AREA_LEAD, "REGISTER_SALES", False),
            (Role.AREA_LEAD, "VIEW_ACTIVITIES", False),
            (Role.AREA_LEAD, "MANAGE_PRODUCTS", False),
            (Role.ANIMAL_TEACHER, "VIEW_ENVIRONMENTS", True),
            (Role.ANIMAL_TEACHER, "MANAGE_ENVIRONMENTS", False),
            (Role.PLANT_TEACHER, "VIEW_SALES", False),
            (Role.STANDARD, "REGISTER_ACTIVITIES", True),
            (Role.STANDARD, "MANAGE_USERS", False),
        ],
    )
    def test_role_grants(self, role, code, granted):
        assert role_has_permission(role, code) is granted


class TestVisiblePages:

    def test_admin_sees_everything(self):
        pages = [p["page"] for p in visible_pages(Role.ADMINISTRATOR)]
        assert pages == [
            "dashboard",
            "usuarios",
            "entornos",
            "actividades",
            "consulta-actividades",
            "ventas",
            "consulta-ventas",
            "inventario",
        ]

    def test_area_lead_pages(self):
        pages = [p["page"] for p in visible_pages(Role.AREA_LEAD)]
        assert pages == ["dashboard", "ventas", "consulta-ventas", "inventario"]

    def test_teacher_pages(self):
        pages = [p["page"] for p in visible_pages(Role.ANIMAL_TEACHER)]
        assert pages == ["dashboard", "entornos"]

    def test_page_permission_lookup(self):
        assert page_permission("usuarios") == "MANAGE_USERS"
        assert page_permission("nowhere") is None
