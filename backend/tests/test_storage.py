"""
Key-value storage tests.

Verifies:
- Missing or malformed collections are seeded with defaults
- An empty list is kept (never re-seeded)
- Plaintext passwords in stored rosters are replaced by bcrypt hashes
- Unknown roles read as the standard role
- Products fall back to the older key without writing it
"""

import json

from agraria.permissions import Role
from agraria.services.auth_service import verify_password
from agraria.services.storage_service import (
    ACTIVITIES_KEY,
    LEGACY_PRODUCTS_KEY,
    PRODUCTS_KEY,
    USERS_KEY,
)


class TestSeeding:

    def test_missing_key_is_seeded_and_written(self, services):
        assert services.store.get_item(USERS_KEY) is None

        users = services.users.load()

        assert [u.username for u in users] == ["admin", "jefe", "prof.animal", "prof.vegetal", "jgarcia"]
        assert services.store.get_item(USERS_KEY) is not None

    def test_malformed_json_falls_back_to_seed(self, services):
        services.store.set_item(USERS_KEY, "[{broken")

        users = services.users.load()

        assert len(users) == 5
        assert json.loads(services.store.get_item(USERS_KEY))[0]["username"] == "admin"

    def test_non_list_value_falls_back_to_seed(self, services):
        services.store.set_item(ACTIVITIES_KEY, '{"id": 1}')
        assert len(services.activities.load()) == 2

    def test_empty_list_is_not_reseeded(self, services):
        services.store.write_json(ACTIVITIES_KEY, [])
        assert services.activities.load() == []

    def test_malformed_records_are_skipped(self, services):
        services.store.write_json(ACTIVITIES_KEY, [
            {"id": 7, "environmentId": 1, "activityTitle": "Poda"},
            {"environmentId": 1},
            "not a record",
        ])

        activities = services.activities.load()
        assert [a.id for a in activities] == [7]

    def test_seeded_passwords_are_hashed(self, services):
        services.users.load()
        stored = json.loads(services.store.get_item(USERS_KEY))

        for record in stored:
            assert "password" not in record
            assert record["passwordHash"].startswith("$2")


class TestLegacyRoster:

    def test_plaintext_password_is_hashed_on_load(self, services):
        services.store.write_json(USERS_KEY, [
            {"id": 1, "username": "admin", "password": "admin123", "role": "administrador", "active": True},
        ])

        users = services.users.load()

        assert verify_password("admin123", users[0].password_hash)
        stored = json.loads(services.store.get_item(USERS_KEY))
        assert "password" not in stored[0]
        assert stored[0]["passwordHash"] == users[0].password_hash

    def test_legacy_roster_can_log_in(self, services, request_context):
        services.store.write_json(USERS_KEY, [
            {"id": 9, "username": "viejo", "password": "secreto1", "role": "estandar", "active": True},
        ])

        session = services.auth.login("viejo", "secreto1")
        assert session.user_id == 9

    def test_unknown_role_reads_as_standard(self, services):
        services.store.write_json(USERS_KEY, [
            {"id": 1, "username": "raro", "password": "raro123", "role": "superuser", "active": True},
        ])

        users = services.users.load()
        assert users[0].role is Role.STANDARD


class TestProductKeys:

    def test_fallback_key_is_read_but_not_written(self, services):
        services.store.write_json(LEGACY_PRODUCTS_KEY, [
            {"id": 1, "name": "Miel", "defaultPrice": 30, "currentStock": 4},
        ])

        products = services.products.load()

        assert [p.name for p in products] == ["Miel"]
        assert products[0].unit_price == 30.0
        assert services.store.get_item(PRODUCTS_KEY) is None

    def test_canonical_key_wins(self, services):
        services.store.write_json(PRODUCTS_KEY, [{"id": 2, "name": "Abono", "unitPrice": 5}])
        services.store.write_json(LEGACY_PRODUCTS_KEY, [{"id": 1, "name": "Miel", "defaultPrice": 30}])

        assert [p.name for p in services.products.load()] == ["Abono"]

    def test_seed_when_both_keys_are_empty(self, services):
        products = services.products.load()

        assert len(products) == 5
        assert services.store.get_item(PRODUCTS_KEY) is not None
        assert services.store.get_item(LEGACY_PRODUCTS_KEY) is None
