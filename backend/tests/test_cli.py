"""
Flask CLI command tests.
"""

from agraria.services.auth_service import verify_password
from agraria.services.storage_service import USERS_KEY


def test_system_init_seeds_collections(app, services):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init"])

    assert result.exit_code == 0, result.output
    assert "PASS sistemaAgraria_users: 5 records" in result.output
    assert "PASS inventory_products: 5 records" in result.output
    assert "PASS sistemaAgraria_sales: 0 records" in result.output
    assert services.store.get_item(USERS_KEY) is not None


def test_users_list(app):
    result = app.test_cli_runner().invoke(args=["users", "list"])

    assert result.exit_code == 0
    assert "prof.vegetal" in result.output
    assert "profesor_vegetal" in result.output


def test_set_password(app, services):
    result = app.test_cli_runner().invoke(args=["users", "set-password", "JEFE", "--password", "clave456"])

    assert result.exit_code == 0, result.output
    assert "PASS Password updated for jefe" in result.output
    assert verify_password("clave456", services.users.find_by_username("jefe").password_hash)


def test_set_password_rejects_short_password(app):
    result = app.test_cli_runner().invoke(args=["users", "set-password", "jefe", "--password", "123"])

    assert result.exit_code != 0
    assert "at least 6 characters" in result.output


def test_set_password_unknown_user(app):
    result = app.test_cli_runner().invoke(args=["users", "set-password", "ghost", "--password", "clave456"])

    assert result.exit_code != 0
    assert "User not found" in result.output


def test_storage_keys_and_show(app, services):
    runner = app.test_cli_runner()
    runner.invoke(args=["system", "init"])

    result = runner.invoke(args=["storage", "keys"])
    assert "sistemaAgraria_environments" in result.output

    result = runner.invoke(args=["storage", "show", "sistemaAgraria_environments"])
    assert result.exit_code == 0
    assert "Huerta Principal" in result.output


def test_storage_show_missing_key(app):
    result = app.test_cli_runner().invoke(args=["storage", "show", "nothing_here"])

    assert result.exit_code != 0
    assert "No value stored under 'nothing_here'" in result.output
