"""
Management commands for deployment and maintenance
"""
import click
from flask.cli import with_appcontext
from sqlalchemy import inspect

from .extensions import db
from .seeders import (
    seed_catalog,
    seed_first_admin,
    seed_packaging_options,
    seed_permissions_and_roles,
)

REQUIRED_TABLES = ('permission', 'role', 'user', 'packaging_option', 'category', 'store')


@click.command('seed-permissions')
@with_appcontext
def seed_permissions_command():
    """Seed permissions and the built-in roles."""
    seed_permissions_and_roles()


@click.command('seed-packaging')
@with_appcontext
def seed_packaging_command():
    """Seed the standard packaging options."""
    seed_packaging_options()


@click.command('seed-catalog')
@click.option('--no-flavors', is_flag=True, help='Only create the category and factory store.')
@with_appcontext
def seed_catalog_command(no_flavors):
    """Seed the gelato category, flavors and the factory store."""
    seed_catalog(include_flavors=not no_flavors)


@click.command('create-admin')
@click.option('--email', default=None, help='Defaults to FIRST_ADMIN_EMAIL.')
@click.option('--password', default=None, help='Defaults to FIRST_ADMIN_PASSWORD.')
@with_appcontext
def create_admin_command(email, password):
    """Create the first admin user (idempotent)."""
    seed_first_admin(email=email, password=password)


@click.command('init-production')
@with_appcontext
def init_production_command():
    """Seed production database with essential data (run after migrations)."""
    print("🚀 Production seeding starting...")
    print("⚠️  Assumes database schema is already migrated (flask db upgrade)")

    tables = inspect(db.engine).get_table_names()
    missing_tables = [t for t in REQUIRED_TABLES if t not in tables]
    if missing_tables:
        print(f"❌ Missing required tables: {missing_tables}")
        print("   Run 'flask db upgrade' first to create database schema")
        raise click.Abort()

    seed_permissions_and_roles()
    seed_packaging_options()
    seed_catalog(include_flavors=False)
    seed_first_admin()
    print("✅ Production seeding complete")


COMMANDS = (
    seed_permissions_command,
    seed_packaging_command,
    seed_catalog_command,
    create_admin_command,
    init_production_command,
)


def register_commands(app):
    """Register all CLI commands in stable order."""
    for command in COMMANDS:
        app.cli.add_command(command)
