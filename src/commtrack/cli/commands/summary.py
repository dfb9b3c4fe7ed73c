"""Commission summary command."""

from decimal import Decimal

import click
from commtrack.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from commtrack.domain.analytics import AnalyticsService
from commtrack.domain.entities import AnalyticsReport


def _money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def _percent(value: Decimal) -> str:
    return f"{value:.1f}%"


def _display_stats(report: AnalyticsReport) -> None:
    stats = report.stats
    click.echo("\nCommission Summary:")
    click.echo("-" * 60)
    click.echo(f"{'Total commission':<30} {_money(stats.total_commission):>20}  ({stats.total_orders} orders)")
    click.echo(f"{'This month':<30} {_money(stats.this_month_commission):>20}  ({stats.this_month_orders} orders)")
    click.echo(f"{'This week':<30} {_money(stats.this_week_commission):>20}  ({stats.this_week_orders} orders)")
    click.echo(f"{'Total revenue':<30} {_money(stats.total_revenue):>20}")
    click.echo(f"{'Average order value':<30} {_money(stats.average_order_value):>20}")


def _display_monthly(report: AnalyticsReport) -> None:
    click.echo("\nMonthly:")
    click.echo("-" * 60)
    click.echo(f"{'Month':<12} {'Orders':>8} {'Revenue':>18} {'Commission':>18}")
    for bucket in report.monthly:
        click.echo(
            f"{bucket.month:<12} {bucket.orders:>8} {_money(bucket.revenue):>18} {_money(bucket.commission):>18}"
        )


def _display_products(report: AnalyticsReport) -> None:
    click.echo("\nProducts:")
    click.echo("-" * 80)
    click.echo(f"{'Product':<28} {'Orders':>8} {'Share':>8} {'Revenue':>16} {'Share':>8} {'Commission':>14}")
    for product in report.products:
        click.echo(
            f"{product.product_name[:28]:<28} {product.orders:>8} {_percent(product.order_share):>8} "
            f"{_money(product.revenue):>16} {_percent(product.revenue_share):>8} {_money(product.commission):>14}"
        )


def _display_growth(report: AnalyticsReport) -> None:
    growth = report.growth
    click.echo("\nGrowth (all time):")
    click.echo("-" * 60)
    sign = "+" if growth.month_over_month > 0 else ""
    click.echo(f"{'Month over month':<30} {sign + _percent(growth.month_over_month):>20}")
    click.echo(f"{'Projected this month':<30} {_money(growth.projected_monthly):>20}")
    if growth.best_month is not None:
        click.echo(f"{'Best month':<30} {growth.best_month:>20}  ({_money(growth.best_month_commission)})")
    click.echo(f"{'Trend':<30} {growth.trend.value:>20}")
    click.echo(f"{'Orders per week':<30} {growth.orders_per_week:>20.1f}")


@click.command("summary")
@period_options
@click.pass_context
def summary(ctx, start_date: str, end_date: str, **kwargs):
    """Show commission totals, monthly rollup, product mix and growth."""
    db = ctx.obj["db"]
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    report = AnalyticsService(db).build_report(date_range)

    if not report.orders and report.growth.best_month is None:
        click.echo("No orders found.")
        return

    _display_stats(report)
    if report.orders:
        _display_monthly(report)
        _display_products(report)
    else:
        click.echo("\nNo orders in the selected period.")
    _display_growth(report)


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
