"""Initialize the default product catalog."""

from decimal import Decimal

import click
from commtrack.domain.catalog import CatalogService


# Sourhouse catalog: (product type, display name, price point, tolerance)
INITIAL_CATALOG = [
    ("goldie", "Goldie", Decimal("149"), Decimal("10")),
    ("goldie_bundle", "Goldie Bundle", Decimal("329.99"), Decimal("15")),
]


@click.command("init-catalog")
@click.option("--force", is_flag=True, help="Replace the existing catalog")
@click.pass_context
def init_catalog(ctx, force: bool):
    """Initialize the product catalog with default entries."""
    db = ctx.obj["db"]
    service = CatalogService(db)

    existing = service.list_entries()
    if existing and not force:
        click.echo("Catalog already has entries. Use --force to overwrite.")
        return

    for entry in existing:
        service.remove_entry(entry.product_type)

    created = 0
    errors = 0
    for product_type, display_name, price_point, tolerance in INITIAL_CATALOG:
        try:
            service.add_entry(product_type, display_name, price_point, tolerance)
            created += 1
        except ValueError as e:
            click.echo(f"Warning: Could not create entry '{product_type}': {e}", err=True)
            errors += 1

    if errors == 0:
        click.echo(f"Successfully created {created} catalog entries.")
    else:
        click.echo(f"Created {created} catalog entries with {errors} errors.")


def register_commands(cli):
    """Register init-catalog command with main CLI."""
    cli.add_command(init_catalog)
