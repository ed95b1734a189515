"""
Session lifetime tests.

Each client holds its own session record, valid for 24 hours from login
(absolute, no sliding renewal). A malformed, expired or orphaned record is
cleared and the request is treated as unauthenticated.
"""

from datetime import datetime, timedelta

import pytest
from flask import session as client_session

from agraria.permissions import Role
from agraria.services.auth_service import NotAuthenticated
from agraria.services.session_service import SESSION_KEY


LOGIN_TIME = datetime(2024, 3, 1, 8, 0, 0)


@pytest.fixture
def clock(services):
    """Controllable clock injected into the auth service."""
    state = {"now": LOGIN_TIME}
    services.auth.clock = lambda: state["now"]
    return state


@pytest.mark.usefixtures("request_context")
class TestExpiry:

    def test_session_valid_before_24_hours(self, services, clock):
        services.auth.login("admin", "admin123")
        clock["now"] = LOGIN_TIME + timedelta(hours=23, minutes=59)

        user = services.auth.check_session()
        assert user is not None
        assert user.username == "admin"

    def test_session_expires_at_24_hours(self, services, clock):
        services.auth.login("admin", "admin123")
        clock["now"] = LOGIN_TIME + timedelta(hours=24)

        assert services.auth.check_session() is None
        assert SESSION_KEY not in client_session

    def test_activity_does_not_extend_session(self, services, clock):
        services.auth.login("admin", "admin123")
        clock["now"] = LOGIN_TIME + timedelta(hours=20)
        assert services.auth.check_session() is not None

        clock["now"] = LOGIN_TIME + timedelta(hours=24, seconds=1)
        assert services.auth.check_session() is None


def test_expired_session_denies_protected_route(client, services, clock):
    resp = client.post('/api/auth/login', json={'username': 'admin', 'password': 'admin123'})
    assert resp.status_code == 200

    clock["now"] = LOGIN_TIME + timedelta(hours=25)
    resp = client.get('/api/dashboard')

    assert resp.status_code == 401
    assert resp.json["redirect"] == "index"
    with client.session_transaction() as sess:
        assert SESSION_KEY not in sess


@pytest.mark.usefixtures("request_context")
class TestMalformedSession:

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            ["admin"],
            {"userId": 1},
            {"userId": 1, "username": "admin", "role": "administrador", "timestamp": "yesterday"},
            {"userId": "abc", "timestamp": "2024-03-01T08:00:00Z"},
        ],
    )
    def test_malformed_record_is_cleared(self, services, raw):
        client_session[SESSION_KEY] = raw

        assert services.auth.check_session() is None
        assert SESSION_KEY not in client_session

    def test_require_auth_raises(self, services):
        with pytest.raises(NotAuthenticated):
            services.auth.require_auth()


@pytest.mark.usefixtures("request_context")
class TestOrphanedSession:

    def test_deleted_user_clears_session(self, services):
        services.auth.login("jgarcia", "usuario123")
        services.users.delete(5)

        assert services.auth.check_session() is None
        assert SESSION_KEY not in client_session

    def test_deactivated_user_clears_session(self, services):
        services.auth.login("jgarcia", "usuario123")
        roster = services.users.load()
        for user in roster:
            if user.id == 5:
                user.active = False
        services.users.save(roster)

        assert services.auth.check_session() is None

    def test_role_change_applies_on_next_check(self, services):
        services.auth.login("jgarcia", "usuario123")
        assert services.auth.is_standard()

        roster = services.users.load()
        for user in roster:
            if user.id == 5:
                user.role = Role.AREA_LEAD
        services.users.save(roster)

        assert services.auth.is_area_lead()
        assert not services.auth.is_standard()


class TestClientIsolation:
    """Every client carries its own login; nothing is shared server-side."""

    def test_client_without_login_is_not_authenticated(self, app, as_admin):
        stranger = app.test_client()

        assert as_admin.get('/api/users').status_code == 200
        resp = stranger.get('/api/users')
        assert resp.status_code == 401
        assert resp.json["redirect"] == "index"

    def test_second_login_does_not_replace_first_client(self, app, as_admin):
        other = app.test_client()
        resp = other.post('/api/auth/login', json={'username': 'jgarcia', 'password': 'usuario123'})
        assert resp.status_code == 200

        assert as_admin.get('/api/auth/session').json["user"]["username"] == "admin"
        assert as_admin.get('/api/users').status_code == 200
        assert other.get('/api/auth/session').json["user"]["username"] == "jgarcia"
        assert other.get('/api/users').status_code == 403

    def test_actions_are_credited_to_the_calling_client(self, app, as_admin, services):
        other = app.test_client()
        other.post('/api/auth/login', json={'username': 'jgarcia', 'password': 'usuario123'})

        resp = as_admin.post('/api/inventory/movements', json={
            "productId": 1,
            "type": "entrada",
            "quantity": 2,
            "reason": "Compra",
        })

        assert resp.status_code == 201
        assert resp.json["movement"]["user"] == "Administrador Sistema"

    def test_tampered_cookie_is_ignored(self, app, client):
        client.set_cookie(app.config["SESSION_COOKIE_NAME"], "forged.value.here")

        resp = client.get('/api/users')
        assert resp.status_code == 401

    def test_logout_only_ends_the_calling_client(self, app, as_admin):
        other = app.test_client()
        other.post('/api/auth/login', json={'username': 'jgarcia', 'password': 'usuario123'})

        other.post('/api/auth/logout')

        assert other.get('/api/auth/session').status_code == 401
        assert as_admin.get('/api/auth/session').status_code == 200
