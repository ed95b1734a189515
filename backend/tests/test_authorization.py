"""
Authorization tests for Sistema Agraria.

Verifies:
- Unauthenticated requests return 401 with redirect to the entry page
- Roles without the page permission get 403 with redirect to the dashboard
- User administration is administrator-only
- Teachers only see the environments assigned to them
"""

import pytest


# =============================================================================
# UNAUTHENTICATED ACCESS: 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a session."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/session"),
            ("GET", "/api/auth/permissions"),
            ("GET", "/api/dashboard"),
            ("GET", "/api/users"),
            ("POST", "/api/users"),
            ("GET", "/api/environments"),
            ("POST", "/api/environments"),
            ("GET", "/api/activities"),
            ("POST", "/api/activities"),
            ("GET", "/api/inventory/products"),
            ("POST", "/api/inventory/movements"),
            ("GET", "/api/sales"),
            ("POST", "/api/sales"),
            ("GET", "/api/reports/activities"),
            ("GET", "/api/reports/sales/export"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json["redirect"] == "index"

    def test_health_is_public(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["status"] == "ok"


# =============================================================================
# AREA LEAD: sales view-only, inventory, no activities
# =============================================================================


class TestAreaLeadAccess:

    @pytest.mark.parametrize(
        "path",
        [
            "/api/activities",
            "/api/reports/activities",
            "/api/users",
        ],
    )
    def test_denied_pages(self, as_area_lead, path):
        resp = as_area_lead.get(path)
        assert resp.status_code == 403
        assert resp.json["redirect"] == "dashboard"

    def test_denied_response_names_permission(self, as_area_lead):
        resp = as_area_lead.get("/api/activities")
        assert resp.json["error"] == "Permission denied"
        assert resp.json["required_permission"] == "VIEW_ACTIVITIES"

    def test_sales_are_view_only(self, as_area_lead):
        resp = as_area_lead.get("/api/sales")
        assert resp.status_code == 200
        assert resp.json["can_register"] is False

        resp = as_area_lead.post("/api/sales", json={})
        assert resp.status_code == 403

    def test_can_open_sales_query_and_inventory(self, as_area_lead):
        assert as_area_lead.get("/api/reports/sales").status_code == 200
        assert as_area_lead.get("/api/inventory/products").status_code == 200


# =============================================================================
# USER ADMINISTRATION: administrators only
# =============================================================================


class TestUserAdministrationAccess:

    @pytest.mark.parametrize("fixture", ["as_area_lead", "as_animal_teacher", "as_standard"])
    def test_non_admin_denied(self, request, fixture):
        client = request.getfixturevalue(fixture)
        resp = client.get("/api/users")
        assert resp.status_code == 403
        assert resp.json["error"] == "Access denied. Administrator permissions are required."

    def test_admin_allowed(self, as_admin):
        resp = as_admin.get("/api/users")
        assert resp.status_code == 200
        assert resp.json["count"] == 5


# =============================================================================
# TEACHERS: assigned environments only
# =============================================================================


class TestTeacherAccess:

    def test_animal_teacher_sees_only_assigned_environments(self, as_animal_teacher):
        resp = as_animal_teacher.get("/api/environments")

        assert resp.status_code == 200
        names = [e["environmentName"] for e in resp.json["items"]]
        assert names == ["Granja Avícola"]
        assert resp.json["can_manage"] is False

    def test_plant_teacher_sees_plant_environments(self, client):
        client.post("/api/auth/login", json={"username": "prof.vegetal", "password": "prof123"})

        resp = client.get("/api/environments")
        names = sorted(e["environmentName"] for e in resp.json["items"])
        assert names == ["Huerta Principal", "Vivero Escolar"]

    def test_unassigned_environment_is_not_found(self, as_animal_teacher):
        resp = as_animal_teacher.get("/api/environments/1")
        assert resp.status_code == 404

    def test_teacher_cannot_manage_environments(self, as_animal_teacher):
        resp = as_animal_teacher.delete("/api/environments/3")
        assert resp.status_code == 403

    def test_teacher_cannot_open_sales(self, as_animal_teacher):
        assert as_animal_teacher.get("/api/sales").status_code == 403

    def test_standard_user_sees_all_environments(self, as_standard):
        resp = as_standard.get("/api/environments")
        assert resp.json["count"] == 3
        assert resp.json["can_manage"] is True
