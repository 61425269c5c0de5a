"""Sync command: migrate local data and load the owner's state."""

import click
from profitfirst.domain.migration import MigrationOrchestrator, MigrationStatus


@click.command("sync")
@click.pass_context
def sync(ctx):
    """Move local data into the database (once) and refresh the local cache.

    Local data is only uploaded when the owner has nothing in the database
    yet; otherwise the database wins. Without an owner there is nothing to
    do.
    """
    owner = ctx.obj["owner"]

    def report(status: MigrationStatus) -> None:
        if status == MigrationStatus.MIGRATING:
            click.echo("Migrating local data...")
        elif status == MigrationStatus.LOADING:
            click.echo("Loading data...")

    orchestrator = MigrationOrchestrator(
        ctx.obj["db"], ctx.obj["cache"], lambda: owner, on_status=report
    )
    result = orchestrator.run()

    if result.status == MigrationStatus.ERROR:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)

    if owner is None:
        click.echo("No owner configured; working from the local cache.")
        return

    if result.migrated:
        click.echo("Local data migrated.")
    click.echo(
        f"Synced {len(result.state.accounts)} accounts and "
        f"{len(result.state.transactions)} transactions."
    )


def register_commands(cli):
    """Register sync command with main CLI."""
    cli.add_command(sync)
