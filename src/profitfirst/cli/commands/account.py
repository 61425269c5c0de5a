"""Account (bucket) management commands."""

import click
from decimal import Decimal, InvalidOperation
from profitfirst.cli.error_handling import handle_domain_error
from profitfirst.cli.formatting import format_money
from profitfirst.cli.ledger_context import get_ledger
from profitfirst.domain.errors import DomainError
from profitfirst.utils.account_resolver import parse_account_type


@click.group()
def account_group():
    """Manage Profit First buckets."""
    pass


@account_group.command("init")
@click.pass_context
def init_accounts(ctx):
    """Create the default buckets if none exist yet.

    Defaults: Company Profit 40%, Owner's Comp 20%, Tax/Zakat 10%,
    Operating Expense 30%, plus the Real Revenue income account.
    """
    ledger = get_ledger(ctx)
    try:
        before = ledger.state()
        state = ledger.seed_default_accounts()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if before.accounts:
        click.echo(f"Accounts already exist ({len(state.accounts)}); nothing to do.")
        return
    click.echo(f"Created {len(state.accounts)} default accounts.")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all buckets with balances and percentages."""
    try:
        state = get_ledger(ctx).state()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not state.accounts:
        click.echo("No accounts found. Run 'profitfirst account init' to create the defaults.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 78)
    for acc in state.accounts:
        click.echo(
            f"{acc.name:20s} | {acc.type.value:11s} | "
            f"Target: {acc.target_percentage:>6}% | Current: {acc.current_percentage:>6}% | "
            f"{format_money(acc.balance, state.currency_symbol)}"
        )


@account_group.command("targets")
@click.argument("assignments", nargs=-1, required=True, metavar="TYPE=PCT...")
@click.pass_context
def set_targets(ctx, assignments: tuple[str, ...]):
    """Set target percentages for every allocation bucket.

    Targets must cover PROFIT, OWNERS_COMP, TAX and OPEX and sum to 100.

    Examples:
        profitfirst account targets PROFIT=5 OWNERS_COMP=50 TAX=15 OPEX=30
    """
    targets = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep:
            click.echo(f"Error: Expected TYPE=PCT, got '{assignment}'", err=True)
            ctx.exit(1)
        try:
            targets[parse_account_type(name)] = Decimal(value.strip().rstrip("%"))
        except InvalidOperation:
            click.echo(f"Error: Invalid percentage '{value}'", err=True)
            ctx.exit(1)
        except ValueError as e:
            handle_domain_error(ctx, e)

    try:
        state = get_ledger(ctx).set_target_percentages(targets)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("Updated targets:")
    for acc in state.accounts:
        if acc.type in targets:
            click.echo(f"  {acc.name}: {acc.target_percentage}%")


@account_group.command("link")
@click.argument("account", metavar="ACCOUNT")
@click.argument("bank_account_id", required=False, metavar="BANK_ACCOUNT_ID")
@click.pass_context
def link_account(ctx, account: str, bank_account_id: str | None):
    """Link a bucket to a bank account, or unlink it when no id is given.

    ACCOUNT can be an account id, type or name.

    Examples:
        profitfirst account link PROFIT 5f0c...
        profitfirst account link "Company Profit"
    """
    try:
        get_ledger(ctx).link_bank_account(account, bank_account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if bank_account_id is None:
        click.echo(f"Unlinked '{account}'")
    else:
        click.echo(f"Linked '{account}' to bank account {bank_account_id}")


@account_group.command("currency")
@click.argument("symbol")
@click.pass_context
def set_currency(ctx, symbol: str):
    """Set the currency symbol used for display."""
    try:
        state = get_ledger(ctx).set_currency(symbol)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Currency set to {state.currency_symbol}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
