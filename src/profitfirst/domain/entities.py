"""Domain model entities for profitfirst.

These are pure data classes representing the Profit First buckets and the
events that move money between them, independent of both the database schema
(snake_case tables) and the import/export payload (camelCase JSON).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Closed set of bucket types."""

    INCOME = "INCOME"
    PROFIT = "PROFIT"
    OWNERS_COMP = "OWNERS_COMP"
    TAX = "TAX"
    OPEX = "OPEX"


# Buckets that receive income, in allocation order.
ALLOCATION_TYPES = (
    AccountType.PROFIT,
    AccountType.OWNERS_COMP,
    AccountType.TAX,
    AccountType.OPEX,
)


@dataclass(frozen=True)
class Account:
    """Profit First bucket."""

    id: str
    name: str
    type: AccountType
    target_percentage: Decimal = Decimal("0")
    current_percentage: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    bank_account_id: Optional[str] = None


@dataclass(frozen=True)
class Allocation:
    """One line item of an income transaction."""

    account_id: str
    amount: Decimal


@dataclass(frozen=True)
class Transaction:
    """Income allocation event."""

    id: str
    date: datetime
    description: str
    total_amount: Decimal
    allocations: tuple[Allocation, ...] = ()

    @property
    def allocated_amount(self) -> Decimal:
        return sum((a.amount for a in self.allocations), Decimal("0"))


@dataclass(frozen=True)
class BankAccount:
    """Real-world bank account a bucket can be linked to."""

    id: str
    bank_name: str
    branch_name: str
    account_number: str
    account_type: str
    created_at: datetime
    routing_number: Optional[str] = None
    swift_code: Optional[str] = None


@dataclass(frozen=True)
class ProfitDistribution:
    """Withdrawal from the PROFIT bucket."""

    id: str
    date: datetime
    quarter: str
    total_profit: Decimal
    distribution_amount: Decimal
    to_owners: Decimal
    to_company: Decimal
    notes: Optional[str] = None
    is_completed: bool = False


@dataclass(frozen=True)
class Profile:
    """Per-owner preferences."""

    id: str
    currency_symbol: Optional[str] = None


DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class AppState:
    """Single-owner working set.

    Never mutated in place; see ``profitfirst.domain.state`` for the
    transformations that produce a new state from an event.
    """

    currency_symbol: str = DEFAULT_CURRENCY
    accounts: tuple[Account, ...] = field(default_factory=tuple)
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    bank_accounts: tuple[BankAccount, ...] = field(default_factory=tuple)
    profit_distributions: tuple[ProfitDistribution, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing worth migrating."""
        return not self.accounts and not self.transactions

    def account_of_type(self, account_type: AccountType) -> Optional[Account]:
        for account in self.accounts:
            if account.type == account_type:
                return account
        return None

    def account_ids_by_type(self) -> dict[AccountType, str]:
        """Map each bucket type to the id of its first account."""
        lookup: dict[AccountType, str] = {}
        for account in self.accounts:
            lookup.setdefault(account.type, account.id)
        return lookup
