"""Income allocation command."""

import click
from profitfirst.cli.error_handling import handle_domain_error
from profitfirst.cli.formatting import format_money
from profitfirst.cli.ledger_context import get_ledger
from profitfirst.domain.errors import DomainError
from profitfirst.utils.amount_parser import parse_amount


@click.command("allocate")
@click.argument("amount")
@click.option("--description", help="Transaction description (default: 'Income Allocation')")
@click.pass_context
def allocate_income(ctx, amount: str, description: str | None):
    """Allocate income across buckets by their target percentages.

    Examples:
        profitfirst allocate 10000
        profitfirst allocate "1,250.50" --description "March invoices"
    """
    ledger = get_ledger(ctx)
    try:
        income = parse_amount(amount)
        transaction = ledger.allocate_income(income, description)
        state = ledger.state()
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    names = {acc.id: acc.name for acc in state.accounts}
    click.echo(
        f"Allocated {format_money(transaction.total_amount, state.currency_symbol)} "
        f"({transaction.description}):"
    )
    for allocation in transaction.allocations:
        name = names.get(allocation.account_id, allocation.account_id)
        click.echo(f"  {name:20s} {format_money(allocation.amount, state.currency_symbol)}")


def register_commands(cli):
    """Register allocate command with main CLI."""
    cli.add_command(allocate_income)
