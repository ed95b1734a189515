# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/agraria/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: python -m flask --app agraria <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask --app agraria system init
#   Idempotent bootstrap: creates the storage table and seeds every empty collection.
# - python -m flask --app agraria system reset-db --yes
#   DEV/TEST only: drop and recreate the storage table (deletes all data).
#
# User inspection/repair:
# - python -m flask --app agraria users list
#   List all users with roles and active status.
# - python -m flask --app agraria users set-password jefe
#   Set a user's password (prompts twice).
#
# Storage inspection:
# - python -m flask --app agraria storage keys
#   List stored keys with their size and last update.
# - python -m flask --app agraria storage show sistemaAgraria_environments
#   Print the JSON stored under a key.

import json

import click
from flask.cli import with_appcontext

from .context import get_services
from .extensions import db
from .models import StorageEntry
from .validation import NotFoundError, ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the storage table and seed default data.

    Collections that already hold data are left untouched. Default users
    (CHANGE THEIR PASSWORDS IN PRODUCTION):
    admin/admin123, jefe/jefe123, prof.animal/prof123, prof.vegetal/prof123,
    jgarcia/usuario123
    """
    click.echo("START Initializing Sistema Agraria storage...")
    db.create_all()

    services = get_services()
    for collection in services.collections():
        records = collection.load()
        click.echo(f"PASS {collection.key}: {len(records)} records")

    click.echo("\n" + "=" * 60)
    click.echo("DONE Sistema Agraria initialized")
    click.echo("=" * 60)


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA! Defaults are re-seeded on next use.
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection and repair commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = get_services().user_service.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 100)
    click.echo(f"{'ID':<5} {'Username':<20} {'Name':<30} {'Role':<20} {'Active'}")
    click.echo("=" * 100)

    for user in users:
        active_str = "Yes" if user.active else "No"
        click.echo(f"{user.id:<5} {user.username:<20} {user.full_name:<30} {user.role.value:<20} {active_str}")

    click.echo("=" * 100 + "\n")


@users_group.command('set-password')
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='New password')
@with_appcontext
def set_password(username, password):
    """Set USERNAME's password."""
    try:
        user = get_services().user_service.set_password(username, password)
    except NotFoundError as e:
        raise click.ClickException(e.message)
    except ValidationError as e:
        raise click.ClickException(e.fields.get("password", str(e)))

    click.echo(f"PASS Password updated for {user.username}")


@click.group('storage')
def storage_group():
    """Key-value storage inspection."""


@storage_group.command('keys')
@with_appcontext
def list_keys():
    """List stored keys."""
    entries = db.session.query(StorageEntry).order_by(StorageEntry.key).all()
    if not entries:
        click.echo("Storage is empty.")
        return
    for entry in entries:
        data = entry.to_dict()
        click.echo(f"{data['key']:<32} {data['size']:>8} bytes  {data['updated_at']}")


@storage_group.command('show')
@click.argument('key')
@with_appcontext
def show_key(key):
    """Print the JSON stored under KEY."""
    store = get_services().store
    raw = store.get_item(key)
    if raw is None:
        raise click.ClickException(f"No value stored under '{key}'")

    try:
        click.echo(json.dumps(json.loads(raw), indent=2, ensure_ascii=False))
    except ValueError:
        click.echo("WARN Stored value is not valid JSON; raw text follows:")
        click.echo(raw)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(storage_group)
