"""CLI error handling helpers."""

import click

from profitfirst.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def require_owner(ctx: click.Context) -> str:
    """Return the configured owner, or exit when running anonymously."""
    owner = ctx.obj["owner"]
    if owner is None:
        click.echo("Error: This command needs an owner. Pass --owner or set PROFITFIRST_OWNER.", err=True)
        ctx.exit(1)
    return owner
