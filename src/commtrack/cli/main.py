"""Main CLI entry point."""

import logging

import click
from commtrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from commtrack.cli.commands import (
    catalog,
    config_cmd,
    ingest,
    init_catalog,
    orders,
    payout,
    review,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides COMMTRACK_DB_PATH environment variable)",
    envvar="COMMTRACK_DB_PATH",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, debug: bool):
    """Commtrack - Affiliate commission tracking.

    Extract referred orders from affiliate notification e-mails, identify
    products by price point and follow earnings, trends and payouts.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
ingest.register_commands(cli)
init_catalog.register_commands(cli)
catalog.register_commands(cli)
config_cmd.register_commands(cli)
orders.register_commands(cli)
review.register_commands(cli)
summary.register_commands(cli)
payout.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
