"""Utility for resolving account references to IDs."""

from typing import Iterable

from profitfirst.domain.entities import Account, AccountType
from profitfirst.domain.errors import NotFoundError


def parse_account_type(value: str) -> AccountType:
    """Parse a bucket type name such as "profit" or "OWNERS_COMP".

    Raises:
        ValueError: If the name is not a known bucket type
    """
    normalized = value.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return AccountType(normalized)
    except ValueError:
        known = ", ".join(t.value for t in AccountType)
        raise ValueError(f"Unknown account type '{value}'. Known types: {known}")


def resolve_account(accounts: Iterable[Account], account: str) -> str:
    """Resolve an account id, bucket type or name to an account id.

    Args:
        accounts: Accounts of the current owner
        account: Account id, type (e.g. "PROFIT") or display name

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
    """
    accounts = list(accounts)
    for acc in accounts:
        if acc.id == account:
            return acc.id

    try:
        account_type = parse_account_type(account)
    except ValueError:
        pass
    else:
        for acc in accounts:
            if acc.type == account_type:
                return acc.id

    for acc in accounts:
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
