"""Classifier settings commands."""

import click
from commtrack.cli.error_handling import handle_domain_error
from commtrack.domain.catalog import CatalogService
from commtrack.domain.errors import DomainError
from commtrack.utils.amount_parser import parse_amount


@click.group()
def config_group():
    """Show or change classifier settings."""
    pass


@config_group.command("show")
@click.pass_context
def show_config(ctx):
    """Show accessory threshold and commission rate."""
    db = ctx.obj["db"]
    settings = CatalogService(db).get_settings()
    click.echo(f"Accessory threshold: ${settings['accessory_threshold']:,.2f}")
    click.echo(f"Commission rate: {settings['commission_rate'] * 100:.2f}%")


@config_group.command("set-threshold")
@click.argument("threshold")
@click.pass_context
def set_threshold(ctx, threshold: str):
    """Set the price below which unmatched orders count as accessories."""
    db = ctx.obj["db"]
    try:
        value = parse_amount(threshold)
        CatalogService(db).set_accessory_threshold(value)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Accessory threshold set to ${value:,.2f}")


@config_group.command("set-rate")
@click.argument("rate")
@click.pass_context
def set_rate(ctx, rate: str):
    """Set the commission rate (e.g., 0.15) for orders ingested from now on."""
    db = ctx.obj["db"]
    try:
        value = parse_amount(rate)
        CatalogService(db).set_commission_rate(value)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Commission rate set to {value * 100:.2f}%")
    click.echo("Existing orders keep the commission computed when they were ingested.")


def register_commands(cli):
    """Register config commands with main CLI."""
    cli.add_command(config_group, name="config")
