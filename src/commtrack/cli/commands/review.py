"""Manual review commands."""

import click
from commtrack.cli.error_handling import handle_domain_error
from commtrack.domain.errors import DomainError
from commtrack.domain.review import ReviewService


@click.group()
def review_group():
    """Review orders whose product could not be identified."""
    pass


@review_group.command("list")
@click.option("--all", "include_resolved", is_flag=True, help="Include approved and dismissed orders")
@click.pass_context
def list_reviews(ctx, include_resolved: bool):
    """List orders that need review."""
    db = ctx.obj["db"]
    service = ReviewService(db)
    flagged = service.list_needing_review(include_resolved=include_resolved)

    if not flagged:
        click.echo("No orders need review.")
        return

    ledger = service.get_ledger()
    click.echo(f"\n{len(flagged)} order(s) flagged for review:")
    click.echo("-" * 80)
    click.echo(f"{'Date':<12} {'Order ID':<14} {'Price':>12} {'Status':<12} {'Product':<20}")
    click.echo("-" * 80)
    for order, status in flagged:
        decision = ledger.get(order.order_id)
        assigned = decision.assigned_product if decision and decision.assigned_product else ""
        click.echo(
            f"{order.date.strftime('%Y-%m-%d'):<12} {order.order_id:<14} "
            f"{f'${order.price:,.2f}':>12} {status.value:<12} {assigned:<20}"
        )


@review_group.command("open")
@click.argument("order_id")
@click.option("--notes", help="Notes for the review")
@click.pass_context
def open_review(ctx, order_id: str, notes: str | None):
    """Start reviewing a flagged order."""
    db = ctx.obj["db"]
    try:
        decision = ReviewService(db).open_review(order_id, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Order {order_id} review is {decision.status.value}")


@review_group.command("approve")
@click.argument("order_id")
@click.option("--product", required=True, help="Product type to assign (e.g., goldie)")
@click.option("--notes", help="Notes for the review")
@click.pass_context
def approve_review(ctx, order_id: str, product: str, notes: str | None):
    """Approve a flagged order with a product assignment."""
    db = ctx.obj["db"]
    try:
        decision = ReviewService(db).approve(order_id, product, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Approved order {order_id} as '{decision.assigned_product}'")


@review_group.command("dismiss")
@click.argument("order_id")
@click.option("--notes", help="Notes for the review")
@click.pass_context
def dismiss_review(ctx, order_id: str, notes: str | None):
    """Dismiss a flagged order without assigning a product."""
    db = ctx.obj["db"]
    try:
        ReviewService(db).dismiss(order_id, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Dismissed order {order_id}")


def register_commands(cli):
    """Register review commands with main CLI."""
    cli.add_command(review_group, name="review")
