"""
Login and logout tests.

Verifies:
- Seeded credentials log in and create the session record
- Wrong password / unknown user / inactive account return 401
- Blank fields return 400 before the login delay
- Usernames match case-insensitively, passwords exactly
"""

import pytest

from agraria.services.auth_service import InvalidCredentials, MissingFields
from agraria.services.session_service import SESSION_KEY
from conftest import login


class TestLogin:

    def test_admin_login_succeeds(self, client, services):
        resp = login(client, "admin", "admin123")

        assert resp.status_code == 200
        body = resp.json
        assert body["user"]["username"] == "admin"
        assert body["user"]["role"] == "administrador"
        assert body["redirect"] == "dashboard"
        assert "passwordHash" not in body["user"]
        assert "securityAnswer" not in body["user"]
        assert "MANAGE_USERS" in body["permissions"]

        with client.session_transaction() as sess:
            stored = sess[SESSION_KEY]
        assert stored["userId"] == 1
        assert stored["username"] == "admin"
        assert stored["role"] == "administrador"
        assert stored["timestamp"].endswith("Z")

    def test_wrong_password_is_rejected(self, client, services):
        resp = login(client, "ADMIN", "wrongpass")

        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid username or password"
        with client.session_transaction() as sess:
            assert SESSION_KEY not in sess

    def test_unknown_user_is_rejected(self, client):
        resp = login(client, "nobody", "admin123")
        assert resp.status_code == 401

    @pytest.mark.parametrize(
        "username,password",
        [
            ("", "admin123"),
            ("admin", ""),
            ("   ", "admin123"),
        ],
    )
    def test_blank_fields_return_400(self, client, username, password):
        resp = login(client, username, password)
        assert resp.status_code == 400
        assert resp.json["error"] == "Please fill in all fields"

    def test_username_is_case_insensitive_and_trimmed(self, client):
        resp = login(client, "  Admin ", "admin123")
        assert resp.status_code == 200
        assert resp.json["user"]["username"] == "admin"

    def test_password_is_case_sensitive(self, client):
        resp = login(client, "admin", "ADMIN123")
        assert resp.status_code == 401

    def test_inactive_user_cannot_log_in(self, client, services):
        roster = services.users.load()
        for user in roster:
            if user.username == "jgarcia":
                user.active = False
        services.users.save(roster)

        resp = login(client, "jgarcia", "usuario123")
        assert resp.status_code == 401

    def test_remember_me_is_stored(self, client, services):
        resp = client.post('/api/auth/login', json={
            'username': 'jefe',
            'password': 'jefe123',
            'rememberMe': True,
        })
        assert resp.status_code == 200
        with client.session_transaction() as sess:
            assert sess[SESSION_KEY]["rememberMe"] is True
            assert sess.permanent is True

    def test_login_is_not_shared_between_clients(self, app, client):
        login(client, "admin", "admin123")
        other = app.test_client()
        login(other, "jefe", "jefe123")

        with client.session_transaction() as sess:
            assert sess[SESSION_KEY]["username"] == "admin"
        with other.session_transaction() as sess:
            assert sess[SESSION_KEY]["username"] == "jefe"

    def test_relogin_on_same_client_switches_user(self, client):
        login(client, "admin", "admin123")
        login(client, "jefe", "jefe123")

        with client.session_transaction() as sess:
            assert sess[SESSION_KEY]["username"] == "jefe"


@pytest.mark.usefixtures("request_context")
class TestLoginDelay:

    def test_delay_applies_to_success_and_failure(self, services):
        calls = []
        services.auth.sleep = calls.append
        services.auth.login_delay = 1.0

        services.auth.login("admin", "admin123")
        with pytest.raises(InvalidCredentials):
            services.auth.login("admin", "nope")

        assert calls == [1.0, 1.0]

    def test_blank_fields_fail_before_delay(self, services):
        calls = []
        services.auth.sleep = calls.append
        services.auth.login_delay = 1.0

        with pytest.raises(MissingFields):
            services.auth.login("", "")

        assert calls == []


class TestLogout:

    def test_logout_clears_session(self, as_admin, services):
        resp = as_admin.post('/api/auth/logout')

        assert resp.status_code == 200
        assert resp.json["redirect"] == "index"
        assert resp.json["redirect_delay_ms"] == 1000
        with as_admin.session_transaction() as sess:
            assert SESSION_KEY not in sess

        assert as_admin.get('/api/auth/session').status_code == 401

    def test_logout_without_session_is_harmless(self, client):
        resp = client.post('/api/auth/logout')
        assert resp.status_code == 200


class TestSessionEndpoint:

    def test_session_returns_user_and_pages(self, as_admin):
        resp = as_admin.get('/api/auth/session')

        assert resp.status_code == 200
        pages = [p["page"] for p in resp.json["pages"]]
        assert pages[0] == "dashboard"
        assert "usuarios" in pages

    def test_permission_catalog_marks_grants(self, as_area_lead):
        resp = as_area_lead.get('/api/auth/permissions')

        assert resp.status_code == 200
        assert resp.json["role"] == "jefe_area"
        granted = {
            entry["code"]
            for entries in resp.json["categories"].values()
            for entry in entries
            if entry["granted"]
        }
        assert granted == {"VIEW_DASHBOARD", "VIEW_SALES", "VIEW_INVENTORY", "RECORD_MOVEMENTS"}
