"""
Training environment tests.
"""

import pytest

from agraria.services.environment_service import is_assigned_to, normalize_teacher_name
from agraria.services.storage_service import ENVIRONMENTS_KEY


def environment_payload(**overrides):
    payload = {
        "environmentName": "Invernadero Norte",
        "environmentType": "vegetal",
        "responsibleId": 4,
        "year": "1",
        "division": "C",
        "group": "Grupo 4",
        "observations": "",
    }
    payload.update(overrides)
    return payload


class TestCreateEnvironment:

    def test_create(self, as_admin):
        resp = as_admin.post("/api/environments", json=environment_payload())

        assert resp.status_code == 201
        assert resp.json["id"] == 4
        assert resp.json["responsibleName"] == "María González"
        assert resp.json["responsibleTeacher"] == "Prof. María González"

    def test_duplicate_name_is_case_insensitive(self, as_admin):
        resp = as_admin.post("/api/environments", json=environment_payload(environmentName="huerta principal"))

        assert resp.status_code == 400
        assert resp.json["fields"]["environmentName"] == "An environment with this name already exists"

    def test_responsible_must_match_type(self, as_admin):
        resp = as_admin.post("/api/environments", json=environment_payload(environmentType="animal", responsibleId=4))

        assert resp.status_code == 400
        assert "responsibleId" in resp.json["fields"]

    def test_other_type_accepts_any_user(self, as_admin):
        resp = as_admin.post("/api/environments", json=environment_payload(environmentType="otro", responsibleId=5))
        assert resp.status_code == 201

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"environmentName": ""}, "environmentName"),
            ({"environmentType": "acuatico"}, "environmentType"),
            ({"responsibleId": 99}, "responsibleId"),
            ({"responsibleId": "abc"}, "responsibleId"),
            ({"year": ""}, "year"),
        ],
    )
    def test_invalid_input(self, as_admin, overrides, field):
        resp = as_admin.post("/api/environments", json=environment_payload(**overrides))
        assert resp.status_code == 400
        assert field in resp.json["fields"]


class TestUpdateAndDelete:

    def test_rename_keeps_own_name_valid(self, as_admin):
        resp = as_admin.put("/api/environments/1", json=environment_payload(environmentName="Huerta Principal"))
        assert resp.status_code == 200
        assert resp.json["group"] == "Grupo 4"

    def test_rename_to_existing_name(self, as_admin):
        resp = as_admin.put("/api/environments/1", json=environment_payload(environmentName="VIVERO ESCOLAR"))
        assert resp.status_code == 400

    def test_delete(self, as_admin, services):
        assert as_admin.delete("/api/environments/2").status_code == 200
        assert [e.id for e in services.environments.load()] == [1, 3]

    def test_delete_missing(self, as_admin):
        assert as_admin.delete("/api/environments/42").status_code == 404


class TestTeacherCandidates:

    def test_teachers_by_kind(self, as_admin):
        resp = as_admin.get("/api/environments/teachers?kind=animal")

        assert resp.status_code == 200
        assert [t["name"] for t in resp.json["items"]] == ["Ana Martínez"]


class TestResponsibleBackfill:

    def test_missing_responsible_id_is_resolved_by_name(self, services):
        services.store.write_json(ENVIRONMENTS_KEY, [
            {"id": 1, "environmentName": "Granja", "environmentType": "animal", "responsibleTeacher": "Prof. Ana Martínez"},
        ])

        env = services.environments.load()[0]
        assert env.responsible_id == 3

    def test_unknown_name_falls_back_to_first_teacher_of_kind(self, services):
        services.store.write_json(ENVIRONMENTS_KEY, [
            {"id": 1, "environmentName": "Vivero", "environmentType": "vegetal", "responsibleTeacher": "Prof. Nadie"},
        ])

        env = services.environments.load()[0]
        assert env.responsible_id == 4


def test_normalize_teacher_name():
    assert normalize_teacher_name("Prof. María González") == "maría gonzález"
    assert normalize_teacher_name("  prof maría gonzález ") == "maría gonzález"
    assert normalize_teacher_name(None) == ""


def test_assignment_requires_matching_kind(services, users):
    environments = {e.id: e for e in services.environments.load()}

    assert is_assigned_to(environments[3], users["prof.animal"])
    assert not is_assigned_to(environments[1], users["prof.animal"])
    assert not is_assigned_to(environments[3], users["admin"])
