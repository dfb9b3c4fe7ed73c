"""Order viewing and export commands."""

from pathlib import Path

import click
from commtrack.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from commtrack.domain.catalog import CatalogService
from commtrack.domain.csv_export import STATUS_LABELS, export_orders_csv
from commtrack.domain.orders import OrderService
from commtrack.domain.review import ReviewService, resolve_product, review_status_of
from commtrack.utils.date_parser import get_date_range


def _filtered_orders(ctx, start_date, end_date, period_flags):
    db = ctx.obj["db"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    start, end = get_date_range(date_range.preset, start=date_range.start, end=date_range.end)
    return OrderService(db).list_orders(start_date=start, end_date=end)


@click.group()
def orders_group():
    """View, export and re-classify orders."""
    pass


@orders_group.command("view")
@period_options
@click.option("--needs-review", is_flag=True, help="Only show orders flagged for review")
@click.pass_context
def view_orders(ctx, start_date: str, end_date: str, needs_review: bool, **kwargs):
    """View orders, newest first."""
    db = ctx.obj["db"]
    orders = _filtered_orders(ctx, start_date, end_date, pop_period_flags(kwargs))
    if needs_review:
        orders = [o for o in orders if o.needs_review]

    if not orders:
        click.echo("No orders found.")
        return

    ledger = ReviewService(db).get_ledger()
    catalog = CatalogService(db).list_entries()

    click.echo(f"\nFound {len(orders)} order(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'Date':<12} {'Order ID':<14} {'Product':<28} {'Price':>12} {'Commission':>12} {'Status':<14}"
    )
    click.echo("-" * 100)

    for order in orders:
        _, product_name = resolve_product(order, ledger, catalog)
        status = STATUS_LABELS[review_status_of(order, ledger)]
        click.echo(
            f"{order.date.strftime('%Y-%m-%d'):<12} {order.order_id:<14} {product_name[:28]:<28} "
            f"{f'${order.price:,.2f}':>12} {f'${order.commission:,.2f}':>12} {status:<14}"
        )


@orders_group.command("export")
@period_options
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write CSV to file instead of stdout")
@click.pass_context
def export_orders(ctx, start_date: str, end_date: str, output: str | None, **kwargs):
    """Export orders as CSV."""
    db = ctx.obj["db"]
    orders = _filtered_orders(ctx, start_date, end_date, pop_period_flags(kwargs))
    content = export_orders_csv(
        orders, ReviewService(db).get_ledger(), CatalogService(db).list_entries()
    )

    if output is None:
        click.echo(content, nl=False)
        return

    Path(output).write_text(content, encoding="utf-8")
    click.echo(f"Exported {len(orders)} order(s) to {output}")


@orders_group.command("reclassify")
@click.pass_context
def reclassify_orders(ctx):
    """Re-classify all stored orders with the current catalog.

    Commissions are not recomputed.
    """
    db = ctx.obj["db"]
    config = CatalogService(db).get_config()
    changed = OrderService(db).reclassify(config)

    if not changed:
        click.echo("No classifications changed.")
        return

    click.echo(f"Re-classified {len(changed)} order(s):")
    for order in changed:
        flag = " (needs review)" if order.needs_review else ""
        click.echo(f"  {order.order_id}: {order.product_name}{flag}")


def register_commands(cli):
    """Register order commands with main CLI."""
    cli.add_command(orders_group, name="orders")
