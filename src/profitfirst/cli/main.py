"""Main CLI entry point."""

import click
from profitfirst.database.factories import create_local_cache, create_sqlite_database
from profitfirst.log import configure_logging

# Import and register all commands at module level
from profitfirst.cli.commands import (
    account,
    allocate,
    bank,
    distribution,
    import_cmd,
    export,
    sync,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PROFITFIRST_DB_PATH environment variable)",
    envvar="PROFITFIRST_DB_PATH",
)
@click.option(
    "--owner",
    help="Owner id for the remote store (overrides PROFITFIRST_OWNER). "
    "Without one, commands work on the local cache.",
    envvar="PROFITFIRST_OWNER",
)
@click.option(
    "--cache-path",
    type=click.Path(),
    help="Path to local cache file (overrides PROFITFIRST_CACHE_PATH environment variable)",
    envvar="PROFITFIRST_CACHE_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def cli(ctx, db_path: str | None, owner: str | None, cache_path: str | None, verbose: bool):
    """Profit First - allocate income into buckets and distribute profit.

    Works offline against a local cache, or against a database per owner
    once --owner is given. Run 'profitfirst sync' to move local data into
    the database.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize storage only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["cache"] = create_local_cache(cache_path=cache_path)
        ctx.obj["owner"] = owner or None


# Register all commands
account.register_commands(cli)
allocate.register_commands(cli)
bank.register_commands(cli)
distribution.register_commands(cli)
import_cmd.register_commands(cli)
export.register_commands(cli)
sync.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
