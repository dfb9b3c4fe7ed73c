"""Notification ingestion command."""

import click
from commtrack.domain.errors import DomainError
from commtrack.domain.ingest import IngestService
from commtrack.domain.message_source import JsonFileMessageSource


@click.command("ingest")
@click.argument("messages_file", type=click.Path(exists=True))
@click.pass_context
def ingest_messages(ctx, messages_file: str):
    """Ingest order notifications from a JSON export of raw messages.

    Messages are expected newest first. Orders already stored are kept and
    later notifications for the same order ID are skipped.
    """
    db = ctx.obj["db"]
    service = IngestService(db)
    source = JsonFileMessageSource(messages_file)

    try:
        result = service.ingest(source.fetch_messages())
    except DomainError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\nIngest complete:")
    click.echo(f"  Imported: {result.imported} orders")
    click.echo(f"  Skipped: {result.skipped} duplicates")
    click.echo(f"  Ignored: {result.ignored} non-order messages")
    flagged = sum(1 for o in result.orders if o.needs_review)
    if flagged:
        click.echo(f"  Needs review: {flagged} orders (see 'review list')")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register ingest command with main CLI."""
    cli.add_command(ingest_messages)
