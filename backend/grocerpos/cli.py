# Overview: Flask CLI command groups for bootstrap and catalog maintenance.

# backend/grocerpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap (DATA_BACKEND=sql only):
# - python -m flask system init-db
#   Create any missing tables. Existing data is kept.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users (AUTH_BACKEND=local):
# - python -m flask users create --email cashier@grocerpos.local --password "Password123!" --full-name "Ayu" --role cashier
#   Create a user with a profile and role (prompts if options are omitted).
#
# Catalog:
# - python -m flask products add --sku RICE-5 --name "Rice 5kg" --price 65000 --stock 20 --category Staples
# - python -m flask products list [--stock low]

import click
from flask import current_app
from flask.cli import with_appcontext

from .datastore import DataStoreError
from .extensions import db, get_auth, get_store
from .services import catalog_service
from .services.auth_service import AuthBackendError
from .validation import ValidationError, ConflictError


def _require_sql_backend() -> bool:
    if current_app.config["DATA_BACKEND"] != "sql":
        click.echo("FAIL Schema commands only apply to DATA_BACKEND=sql; manage the hosted schema with migrations.")
        return False
    return True


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    if not _require_sql_backend():
        return
    db.create_all()
    click.echo("PASS Tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not _require_sql_backend():
        return
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@click.group('users')
def users_group():
    """User bootstrap commands."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--full-name', default='', help='Display name')
@click.option('--role', type=click.Choice(['admin', 'cashier']), default='cashier', help='Role')
@with_appcontext
def create_user_cli(email, password, full_name, role):
    """
    Create a user with a profile and role.

    Password must meet strength requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character
    """
    try:
        session = get_auth().sign_up(email, password, full_name or None)
        user_id = session.identity.user_id

        if role != "cashier":
            get_store().update("user_roles", {"role": role}, {"user_id": user_id})

        click.echo(f"PASS Created user: {email} with role '{role}' (ID: {user_id})")

    except ValidationError as e:
        click.echo(f"FAIL Validation failed: {str(e)}")
        click.echo("Requirements: 8+ chars, uppercase, lowercase, digit, special char")
    except ConflictError as e:
        click.echo(f"FAIL {str(e)}")
    except (AuthBackendError, DataStoreError) as e:
        click.echo(f"FAIL Failed to create user: {str(e)}")


@click.group('products')
def products_group():
    """Catalog commands."""


@products_group.command('add')
@click.option('--sku', prompt=True, help='Unique SKU')
@click.option('--name', prompt=True, help='Product name')
@click.option('--price', prompt=True, help='Unit price')
@click.option('--stock', default='0', help='Initial stock quantity')
@click.option('--category', default='', help='Category')
@click.option('--description', default='', help='Description')
@with_appcontext
def add_product_cli(sku, name, price, stock, category, description):
    """Add a product to the catalog."""
    try:
        product = catalog_service.add_product(get_store(), {
            "sku": sku,
            "name": name,
            "price": price,
            "stock_quantity": stock,
            "category": category,
            "description": description,
        })
        click.echo(f"PASS Added {product.sku}: {product.name} @ {product.price} (stock {product.stock_quantity})")
    except (ValidationError, ConflictError, DataStoreError) as e:
        click.echo(f"FAIL Failed to add product: {str(e)}")


@products_group.command('list')
@click.option('--search', default=None, help='Name or SKU substring')
@click.option('--category', default=None, help='Category')
@click.option('--stock', type=click.Choice(['all', 'low', 'out']), default='all', help='Stock bucket')
@with_appcontext
def list_products_cli(search, category, stock):
    """List products ordered by name."""
    threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    products = catalog_service.filter_products(
        catalog_service.load(get_store()),
        search=search,
        category=category,
        stock=stock,
        low_threshold=threshold,
    )
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'SKU':<16} {'Name':<30} {'Category':<16} {'Price':>12} {'Stock':>6}")
    click.echo("-" * 84)
    for p in products:
        flag = " LOW" if p.stock_quantity <= threshold else ""
        click.echo(f"{p.sku:<16} {p.name[:30]:<30} {(p.category or '-'):<16} {p.price:>12} {p.stock_quantity:>6}{flag}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(products_group)
