"""Bank account commands."""

import click
from profitfirst.cli.error_handling import handle_domain_error
from profitfirst.cli.ledger_context import get_ledger
from profitfirst.domain.errors import DomainError


@click.group()
def bank_group():
    """Manage bank accounts that buckets can be linked to."""
    pass


@bank_group.command("add")
@click.argument("bank_name")
@click.option("--branch", default="", help="Branch name")
@click.option("--number", "account_number", default="", help="Account number")
@click.option("--type", "account_type", default="", help="Account type (e.g. checking)")
@click.option("--routing", help="Routing number")
@click.option("--swift", help="SWIFT code")
@click.pass_context
def add_bank_account(
    ctx,
    bank_name: str,
    branch: str,
    account_number: str,
    account_type: str,
    routing: str | None,
    swift: str | None,
):
    """Add a bank account."""
    try:
        bank_account = get_ledger(ctx).add_bank_account(
            bank_name,
            branch_name=branch,
            account_number=account_number,
            account_type=account_type,
            routing_number=routing,
            swift_code=swift,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created bank account '{bank_account.bank_name}' (ID: {bank_account.id})")


@bank_group.command("list")
@click.pass_context
def list_bank_accounts(ctx):
    """List bank accounts."""
    try:
        state = get_ledger(ctx).state()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not state.bank_accounts:
        click.echo("No bank accounts found.")
        return

    linked: dict[str, list[str]] = {}
    for acc in state.accounts:
        if acc.bank_account_id is not None:
            linked.setdefault(acc.bank_account_id, []).append(acc.name)

    click.echo("\nBank accounts:")
    click.echo("-" * 78)
    for ba in state.bank_accounts:
        buckets = ", ".join(linked.get(ba.id, [])) or "-"
        click.echo(f"{ba.bank_name:20s} | {ba.account_number:12s} | {buckets} | {ba.id}")


@bank_group.command("remove")
@click.argument("bank_account_id", metavar="ID")
@click.pass_context
def remove_bank_account(ctx, bank_account_id: str):
    """Remove a bank account; linked buckets are unlinked."""
    try:
        get_ledger(ctx).remove_bank_account(bank_account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed bank account {bank_account_id}")


def register_commands(cli):
    """Register bank account commands with main CLI."""
    cli.add_command(bank_group, name="bank")
