# Overview: Flask CLI command groups for bootstrap, user inspection, and backups.

# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables, the primary admin, default agents and settings.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and status.
# - python -m flask users create --username alice --password "secret1" --role manager
#   Create a user (prompts if options are omitted).
#
# Backups:
# - python -m flask backup export backup.json
#   Write a snapshot (credentials redacted) to a file.
# - python -m flask backup restore backup.json
#   Restore a snapshot in one transaction (replaces all agreements).

import json

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import ServiceError
from .extensions import db
from .services.registry import build_services, seed_defaults
from .validation import UserInput


def _services():
    return build_services(db.session, current_app.config)


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the LeaseDesk database.

    Creates:
    - All tables (no-op for tables that already exist)
    - The primary admin (only when there are no users yet)
    - The settings row and the default agent list

    SECURITY: Change the admin password immediately in production!
    """
    click.echo("START Initializing LeaseDesk...")
    db.create_all()
    click.echo("PASS Tables ready")

    result = seed_defaults(_services(), current_app.config)
    admin_name = current_app.config["PRIMARY_ADMIN_USERNAME"]
    if result["admin_created"]:
        click.echo(f"PASS Created primary admin: {admin_name}")
    else:
        click.echo("PASS Users already present; admin not seeded")
    click.echo(f"PASS Default agents seeded: {result['agents_seeded']}")
    click.echo("DONE System initialized.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', default='user', show_default=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """Create a new user."""
    services = _services()
    try:
        data = UserInput.from_payload(
            {"username": username, "password": password, "role": role},
            roles=services.roles,
        )
        user = services.users.create(data, actor="cli")
    except ServiceError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)
    click.echo(f"PASS Created user {user.username} (ID: {user.id}, role: {user.role})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with role and status."""
    users = _services().users.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Username':<24} {'Role':<12} {'Status':<10} {'Last login'}")
    click.echo("="*80)

    for user in users:
        last_login = str(user.last_login_at)[:19] if user.last_login_at else "-"
        click.echo(f"{user.id:<5} {user.username:<24} {user.role:<12} {user.status:<10} {last_login}")

    click.echo("="*80 + "\n")


@click.group('backup')
def backup_group():
    """Backup export and restore commands."""


@backup_group.command('export')
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
@with_appcontext
def export_backup_cli(path):
    """Write a snapshot to PATH. Stored credentials are redacted."""
    snapshot = _services().backup.export()
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(snapshot, fh, indent=2, ensure_ascii=False)
    click.echo(f"PASS Exported {len(snapshot['agreements'])} agreements and {len(snapshot['users'])} users to {path}")


@backup_group.command('restore')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def restore_backup_cli(path, yes):
    """Restore a snapshot from PATH. Replaces every agreement."""
    if not yes:
        click.confirm("WARN This replaces ALL agreements. Continue?", abort=True)

    with open(path, encoding="utf-8") as fh:
        try:
            snapshot = json.load(fh)
        except json.JSONDecodeError as e:
            click.echo(f"FAIL {path} is not valid JSON: {e}")
            raise SystemExit(1)

    try:
        result = _services().backup.restore(snapshot, actor="cli")
    except ServiceError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    click.echo(f"PASS Restored {result.restored_count} agreements, {result.users} users")
    if result.skipped_users:
        click.echo(f"SKIP Users not restored: {', '.join(result.skipped_users)}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(backup_group)
