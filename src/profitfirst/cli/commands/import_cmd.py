"""Import command for JSON backups and spreadsheet exports."""

import click
from profitfirst.cli.error_handling import handle_domain_error, require_owner
from profitfirst.domain.errors import DomainError
from profitfirst.domain.importer import ImportService
from profitfirst.domain.loader import StateLoader


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--dry-run", is_flag=True, help="Validate only; write nothing")
@click.pass_context
def import_file(ctx, file: str, dry_run: bool):
    """Import a .json backup or a .csv spreadsheet export.

    The file is validated first. Any error stops the import before anything
    is written; warnings are shown but do not block. Re-importing the same
    file updates rows in place instead of duplicating them.

    Examples:
        profitfirst --owner me import profit-first-backup-2026-01-31.json
        profitfirst --owner me import "Profit First 2024.csv" --dry-run
    """
    owner = require_owner(ctx)
    db = ctx.obj["db"]
    service = ImportService(db)

    try:
        result = service.import_file(owner, file, dry_run=dry_run)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    for finding in result.report.warnings:
        click.echo(f"Warning: {finding.message}", err=True)

    if not result.report.is_valid:
        click.echo(f"Validation failed with {len(result.report.errors)} error(s):", err=True)
        for finding in result.report.errors:
            click.echo(f"  {finding}", err=True)
        ctx.exit(1)

    counts = result.counts
    summary = (
        f"{counts['accounts']} accounts, {counts['transactions']} transactions, "
        f"{counts['profit_distributions']} distributions, {counts['bank_accounts']} bank accounts"
    )
    if dry_run:
        click.echo(f"Dry run: would import {summary}")
        return

    try:
        state = StateLoader(db).load(owner)
        ctx.obj["cache"].save_state(state)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nImport complete: {summary}")
    click.echo(f"Now tracking {len(state.transactions)} transactions.")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_file)
