"""Export command."""

from pathlib import Path

import click
from profitfirst.cli.error_handling import handle_domain_error
from profitfirst.cli.ledger_context import get_ledger
from profitfirst.domain.errors import DomainError
from profitfirst.domain.payload import dump_payload
from profitfirst.utils.date_parser import utc_now


def default_export_name() -> str:
    return f"profit-first-backup-{utc_now().date().isoformat()}.json"


@click.command("export")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file (default: profit-first-backup-YYYY-MM-DD.json)",
)
@click.pass_context
def export_data(ctx, output: str | None):
    """Export all data as JSON that 'profitfirst import' accepts."""
    try:
        payload = get_ledger(ctx).export_payload()
    except DomainError as e:
        handle_domain_error(ctx, e)

    path = Path(output or default_export_name())
    try:
        path.write_text(dump_payload(payload) + "\n", encoding="utf-8")
    except OSError as e:
        handle_domain_error(ctx, ValueError(f"Could not write {path}: {e}"))

    click.echo(
        f"Exported {len(payload['accounts'])} accounts and "
        f"{len(payload['transactions'])} transactions to {path}"
    )


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_data)
