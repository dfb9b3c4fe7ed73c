"""Product catalog management commands."""

import click
from commtrack.cli.error_handling import handle_domain_error
from commtrack.domain.catalog import CatalogService
from commtrack.domain.errors import DomainError
from commtrack.utils.amount_parser import parse_non_negative_amount


@click.group()
def catalog_group():
    """Manage the product catalog used to identify orders by price."""
    pass


@catalog_group.command("list")
@click.pass_context
def list_entries(ctx):
    """List catalog entries in matching priority order."""
    db = ctx.obj["db"]
    service = CatalogService(db)
    entries = service.list_entries()

    if not entries:
        click.echo("No catalog entries found. Use 'init-catalog' or 'catalog add'.")
        return

    click.echo(f"\n{'Type':<20} {'Name':<30} {'Price':>10} {'Tolerance':>10} {'Range':>22}")
    click.echo("-" * 96)
    for entry in entries:
        price_range = f"${entry.lower_bound:,.2f} - ${entry.upper_bound:,.2f}"
        click.echo(
            f"{entry.product_type:<20} {entry.display_name:<30} "
            f"{f'${entry.price_point:,.2f}':>10} {f'${entry.tolerance:,.2f}':>10} {price_range:>22}"
        )


@catalog_group.command("add")
@click.argument("product_type")
@click.argument("display_name")
@click.option("--price", required=True, help="Price point (e.g., 149 or $149.00)")
@click.option("--tolerance", default="0", show_default=True, help="Allowed deviation either side")
@click.pass_context
def add_entry(ctx, product_type: str, display_name: str, price: str, tolerance: str):
    """Add a catalog entry.

    Examples:
        commtrack catalog add goldie "Goldie" --price 149 --tolerance 10
    """
    db = ctx.obj["db"]
    service = CatalogService(db)

    try:
        entry = service.add_entry(
            product_type=product_type,
            display_name=display_name,
            price_point=parse_non_negative_amount(price),
            tolerance=parse_non_negative_amount(tolerance),
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Added '{entry.product_type}' matching ${entry.lower_bound:,.2f} - ${entry.upper_bound:,.2f}"
    )


@catalog_group.command("remove")
@click.argument("product_type")
@click.pass_context
def remove_entry(ctx, product_type: str):
    """Remove a catalog entry. Already stored orders keep their classification."""
    db = ctx.obj["db"]
    service = CatalogService(db)

    try:
        service.remove_entry(product_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Removed catalog entry '{product_type}'")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(catalog_group, name="catalog")
