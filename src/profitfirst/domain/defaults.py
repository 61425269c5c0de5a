"""Default bucket seeding."""

import uuid
from decimal import Decimal

from profitfirst.domain.entities import Account, AccountType

# Standard Profit First starting percentages.
DEFAULT_BUCKETS = (
    ("Real Revenue", AccountType.INCOME, Decimal("0")),
    ("Company Profit", AccountType.PROFIT, Decimal("40")),
    ("Owner's Comp", AccountType.OWNERS_COMP, Decimal("20")),
    ("Tax/Zakat", AccountType.TAX, Decimal("10")),
    ("Operating Expense", AccountType.OPEX, Decimal("30")),
)


def create_default_accounts() -> list[Account]:
    """Create one zero-balance account per bucket type with fresh ids."""
    return [
        Account(
            id=str(uuid.uuid4()),
            name=name,
            type=account_type,
            target_percentage=target,
        )
        for name, account_type, target in DEFAULT_BUCKETS
    ]
