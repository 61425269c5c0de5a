"""Profit distribution commands."""

import click
from profitfirst.cli.error_handling import handle_domain_error
from profitfirst.cli.formatting import format_money
from profitfirst.cli.ledger_context import get_ledger
from profitfirst.domain.errors import DomainError


@click.group()
def distribution_group():
    """Manage quarterly profit distributions."""
    pass


@distribution_group.command("create")
@click.option("--notes", help="Optional notes")
@click.pass_context
def create_distribution(ctx, notes: str | None):
    """Distribute half of the Profit bucket for the current quarter.

    Half of the distribution goes to the owners, half stays with the company.
    """
    ledger = get_ledger(ctx)
    try:
        dist = ledger.create_distribution(notes)
        currency = ledger.state().currency_symbol
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {dist.quarter} distribution (ID: {dist.id})")
    click.echo(f"  Distributed: {format_money(dist.distribution_amount, currency)}")
    click.echo(f"  To owners:   {format_money(dist.to_owners, currency)}")
    click.echo(f"  To company:  {format_money(dist.to_company, currency)}")


@distribution_group.command("list")
@click.pass_context
def list_distributions(ctx):
    """List profit distributions, newest first."""
    try:
        state = get_ledger(ctx).state()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not state.profit_distributions:
        click.echo("No distributions found.")
        return

    click.echo("\nDistributions:")
    click.echo("-" * 78)
    for dist in state.profit_distributions:
        status = "done" if dist.is_completed else "pending"
        line = (
            f"{dist.quarter:8s} | {dist.date.date().isoformat()} | "
            f"{format_money(dist.distribution_amount, state.currency_symbol):>16s} | "
            f"{status:7s} | {dist.id}"
        )
        if dist.notes:
            line += f" | {dist.notes}"
        click.echo(line)


@distribution_group.command("toggle")
@click.argument("distribution_id", metavar="ID")
@click.pass_context
def toggle_distribution(ctx, distribution_id: str):
    """Mark a distribution completed, or back to pending."""
    try:
        dist = get_ledger(ctx).toggle_distribution(distribution_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    status = "completed" if dist.is_completed else "pending"
    click.echo(f"Distribution {dist.quarter} marked {status}")


def register_commands(cli):
    """Register distribution commands with main CLI."""
    cli.add_command(distribution_group, name="distribution")
