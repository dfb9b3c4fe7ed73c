"""Payout reconciliation commands."""

import click
from commtrack.cli.error_handling import handle_domain_error
from commtrack.domain.errors import DomainError
from commtrack.domain.payout import PayoutService
from commtrack.utils.amount_parser import parse_non_negative_amount
from commtrack.utils.date_parser import end_of_day, parse_date, start_of_day


@click.group()
def payout_group():
    """Record and list affiliate payouts."""
    pass


@payout_group.command("create")
@click.option("--start-date", required=True, help="First day covered (YYYY-MM-DD)")
@click.option("--end-date", required=True, help="Last day covered, inclusive (YYYY-MM-DD)")
@click.option("--amount", required=True, help="Amount paid out")
@click.option("--notes", help="Notes for the payout")
@click.pass_context
def create_payout(ctx, start_date: str, end_date: str, amount: str, notes: str | None):
    """Record a payout covering all orders in a date range."""
    db = ctx.obj["db"]
    service = PayoutService(db)

    try:
        period_start = start_of_day(parse_date(start_date))
        period_end = end_of_day(parse_date(end_date))
        value = parse_non_negative_amount(amount)
        overlapping = service.find_overlapping(period_start, period_end)
        payout = service.create_payout(period_start, period_end, value, notes=notes)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    for other in overlapping:
        click.echo(
            f"Warning: period overlaps payout {other.id[:8]} "
            f"({other.period_start:%Y-%m-%d} - {other.period_end:%Y-%m-%d})",
            err=True,
        )
    click.echo(f"Recorded payout {payout.id[:8]} of ${payout.amount:,.2f} covering {len(payout.order_ids)} order(s)")


@payout_group.command("list")
@click.pass_context
def list_payouts(ctx):
    """List payouts, newest first."""
    db = ctx.obj["db"]
    service = PayoutService(db)
    payouts = service.list_payouts()

    if not payouts:
        click.echo("No payouts recorded.")
        return

    click.echo(f"\n{'ID':<10} {'Paid':<12} {'Period':<25} {'Amount':>14} {'Orders':>8}")
    click.echo("-" * 75)
    for payout in payouts:
        period = f"{payout.period_start:%Y-%m-%d} - {payout.period_end:%Y-%m-%d}"
        click.echo(
            f"{payout.id[:8]:<10} {payout.date:%Y-%m-%d}   {period:<25} "
            f"{f'${payout.amount:,.2f}':>14} {len(payout.order_ids):>8}"
        )
    click.echo("-" * 75)
    click.echo(f"{'Total paid':<48} {f'${service.total_paid():,.2f}':>14}")
    click.echo(f"{'Outstanding commission':<48} {f'${service.outstanding_commission():,.2f}':>14}")


def register_commands(cli):
    """Register payout commands with main CLI."""
    cli.add_command(payout_group, name="payout")
