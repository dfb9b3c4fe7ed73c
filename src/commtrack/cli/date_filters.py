"""CLI helpers for date range resolution."""

import click

from commtrack.domain.entities import DateRange, DateRangePreset
from commtrack.utils.date_parser import end_of_day, parse_date, start_of_day

PERIOD_OPTIONS = [
    ("--this-month", "this_month", "Orders from the start of this month"),
    ("--last-30-days", "last_30_days", "Orders from the last 30 days"),
    ("--last-90-days", "last_90_days", "Orders from the last 90 days"),
    ("--ytd", "ytd", "Orders from the start of this year"),
    ("--all-time", "all_time", "All orders (default)"),
]


def period_options(func):
    """Add the period flags and --start-date/--end-date options to a command."""
    for flag, name, help_text in reversed(PERIOD_OPTIONS):
        func = click.option(flag, name, is_flag=True, help=help_text)(func)
    func = click.option(
        "--end-date", help="End date, inclusive (YYYY-MM-DD or relative like 'today')"
    )(func)
    func = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')"
    )(func)
    return func


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove the period flags from a command's keyword arguments."""
    return {name: kwargs.pop(name, False) for _, name, _ in PERIOD_OPTIONS}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_preset: DateRangePreset = DateRangePreset.ALL_TIME,
) -> DateRange:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-30-days, --last-90-days, --ytd, --all-time) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --ytd, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                return DateRange(preset=DateRangePreset(period))

    if not start_date and not end_date:
        return DateRange(preset=default_preset)

    start = None
    end = None
    if start_date:
        try:
            start = start_of_day(parse_date(start_date))
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = end_of_day(parse_date(end_date))
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return DateRange(preset=DateRangePreset.CUSTOM, start=start, end=end)
