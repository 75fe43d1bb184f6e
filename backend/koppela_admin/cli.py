# Overview: Flask CLI commands for inspecting the admin API the console talks to.

# backend/koppela_admin/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Point ADMIN_API_BASE_URL at the admin API.
# - Use: python -m flask api <command> [options]
#
# - python -m flask api plans
#   List subscription plans.
# - python -m flask api stores --business-id 1 [--all] [--token TOKEN]
#   List a business's stores (inactive ones only with --all).
# - python -m flask api inventory --business-id 1 --store-id 2 [--token TOKEN]
#   Print the stock held at one store.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import admin_api
from .services import store_service, subscription_service
from .services.api_client import AdminApiError


def _client(token):
    headers = {"Authorization": f"Bearer {token}"} if token else None
    return admin_api.create_client(current_app, headers)


@click.group('api')
def api_group():
    """Admin API inspection commands."""


@api_group.command('plans')
@with_appcontext
def list_plans():
    """List subscription plans."""
    with _client(None) as api:
        try:
            plans = subscription_service.list_plans(api)
        except (subscription_service.SubscriptionError, AdminApiError) as e:
            raise click.ClickException(str(e))

    if not plans:
        click.echo("No plans found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Name':<20} {'Display Name':<30} {'Monthly'}")
    click.echo("="*70)
    for plan in plans:
        click.echo(f"{plan.id:<5} {plan.name:<20} {plan.display_name:<30} {plan.price_monthly:,.0f}")
    click.echo("="*70 + "\n")


@api_group.command('stores')
@click.option('--business-id', type=int, required=True, help='Business ID')
@click.option('--all', 'include_inactive', is_flag=True, help='Include inactive stores')
@click.option('--token', envvar='ADMIN_API_TOKEN', help='Bearer token for the admin API')
@with_appcontext
def list_stores(business_id, include_inactive, token):
    """List stores of a business."""
    with _client(token) as api:
        try:
            stores = store_service.list_stores(api, business_id, include_inactive=include_inactive)
        except (store_service.StoreError, AdminApiError) as e:
            raise click.ClickException(str(e))

    if not stores:
        click.echo(f"No stores found for business {business_id}.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<30} {'Type':<15} {'Active':<8} {'Items'}")
    click.echo("="*80)
    for store in stores:
        active_str = "Yes" if store.is_active else "No"
        click.echo(
            f"{store.id:<5} {store.name:<30} {store.store_type.value:<15} {active_str:<8} {store.inventory_count}"
        )
    click.echo("="*80 + "\n")


@api_group.command('inventory')
@click.option('--business-id', type=int, required=True, help='Business ID')
@click.option('--store-id', type=int, required=True, help='Store ID')
@click.option('--token', envvar='ADMIN_API_TOKEN', help='Bearer token for the admin API')
@with_appcontext
def show_inventory(business_id, store_id, token):
    """Print the stock held at one store."""
    with _client(token) as api:
        try:
            items = store_service.load_inventory(api, business_id, store_id)
        except (store_service.StoreError, AdminApiError) as e:
            raise click.ClickException(str(e))

    if not items:
        click.echo(f"Store {store_id} holds no stock.")
        return

    click.echo(f"\n{'Product':<8} {'SKU':<15} {'Name':<35} {'Quantity'}")
    click.echo("-"*70)
    for item in items:
        click.echo(f"{item.product_id:<8} {item.sku or '-':<15} {item.name:<35} {item.quantity}")
    click.echo(f"\nTotal units: {sum(item.quantity for item in items)}\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(api_group)
