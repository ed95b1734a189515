"""
Pytest fixtures for Sistema Agraria backend tests.

Provides a fresh application per test (in-memory SQLite, no login delay,
cheap bcrypt), the test client, the service container and login helpers.
Collections start empty and are seeded on first read, as in production.
"""

import pytest

from agraria import create_app
from agraria.context import get_services
from agraria.extensions import db


TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret-key",
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SQLALCHEMY_TRACK_MODIFICATIONS": False,
    "LOGIN_DELAY_SECONDS": 0,
    "BCRYPT_ROUNDS": 4,
}


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app(dict(TEST_CONFIG))

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def services(app):
    """The application's service container."""
    return get_services()


@pytest.fixture(scope='function')
def users(services):
    """Seeded roster keyed by username."""
    return {user.username: user for user in services.users.load()}


@pytest.fixture(scope='function')
def request_context(app):
    """
    A single request context for service-level auth tests.

    The session record lives in the client's cookie session, which only
    exists inside a request.
    """
    with app.test_request_context():
        yield


def login(client, username: str, password: str):
    """Helper to log in through the API; returns the response."""
    return client.post('/api/auth/login', json={
        'username': username,
        'password': password,
    })


@pytest.fixture(scope='function')
def as_admin(client):
    resp = login(client, "admin", "admin123")
    assert resp.status_code == 200
    return client


@pytest.fixture(scope='function')
def as_area_lead(client):
    resp = login(client, "jefe", "jefe123")
    assert resp.status_code == 200
    return client


@pytest.fixture(scope='function')
def as_animal_teacher(client):
    resp = login(client, "prof.animal", "prof123")
    assert resp.status_code == 200
    return client


@pytest.fixture(scope='function')
def as_standard(client):
    resp = login(client, "jgarcia", "usuario123")
    assert resp.status_code == 200
    return client
