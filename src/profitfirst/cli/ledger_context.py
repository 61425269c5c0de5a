"""CLI helpers for picking where ledger commands read and write."""

import click

from profitfirst.domain.ledger import LedgerService
from profitfirst.domain.repository import (
    LocalStateRepository,
    RemoteStateRepository,
    StateRepository,
)


def get_repository(ctx: click.Context) -> StateRepository:
    """Remote store for a known owner, local cache otherwise."""
    owner = ctx.obj["owner"]
    if owner is None:
        return LocalStateRepository(ctx.obj["cache"])
    return RemoteStateRepository(ctx.obj["db"], owner)


def get_ledger(ctx: click.Context) -> LedgerService:
    return LedgerService(get_repository(ctx))
