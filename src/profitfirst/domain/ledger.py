"""Ledger domain service: the day-to-day Profit First operations."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from profitfirst.domain.defaults import create_default_accounts
from profitfirst.domain.entities import (
    ALLOCATION_TYPES,
    Account,
    AccountType,
    Allocation,
    AppState,
    BankAccount,
    ProfitDistribution,
    Transaction,
)
from profitfirst.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    distribution_not_found,
)
from profitfirst.domain.payload import state_to_payload
from profitfirst.domain.repository import StateRepository
from profitfirst.domain.state import (
    AccountsSeeded,
    BankAccountAdded,
    BankAccountLinked,
    BankAccountRemoved,
    CurrencyChanged,
    DistributionAdded,
    DistributionToggled,
    TargetsUpdated,
    TransactionAdded,
)
from profitfirst.utils.account_resolver import resolve_account
from profitfirst.utils.amount_parser import round_cents
from profitfirst.utils.date_parser import format_iso, quarter_label, utc_now

HUNDRED = Decimal("100")
DEFAULT_DESCRIPTION = "Income Allocation"


def split_income(accounts: tuple[Account, ...], amount: Decimal) -> tuple[Allocation, ...]:
    """Split ``amount`` across non-INCOME buckets by target percentage."""
    return tuple(
        Allocation(account_id=acc.id, amount=round_cents(amount * acc.target_percentage / HUNDRED))
        for acc in accounts
        if acc.type != AccountType.INCOME
    )


def split_profit(total_profit: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    """Return (distribution amount, to owners, to company) for a profit balance."""
    distribution_amount = round_cents(total_profit / 2)
    to_owners = round_cents(distribution_amount / 2)
    return distribution_amount, to_owners, distribution_amount - to_owners


class LedgerService:
    """Service for allocating income and distributing profit."""

    def __init__(self, repository: StateRepository):
        """Initialize ledger service.

        Args:
            repository: Where the working set is loaded from and events persisted
        """
        self.repository = repository

    def state(self) -> AppState:
        return self.repository.load()

    def seed_default_accounts(self) -> AppState:
        """Create the default buckets on first use; existing accounts are kept."""
        state = self.repository.load()
        if state.accounts:
            return state
        return self.repository.commit(AccountsSeeded(tuple(create_default_accounts())))

    def allocate_income(
        self,
        amount: Decimal,
        description: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Transaction:
        """Record income and credit each bucket its target share.

        Args:
            amount: Income amount, must be positive
            description: Transaction description
            date: Transaction date (defaults to now)

        Returns:
            The recorded transaction

        Raises:
            ValidationError: If the amount is not positive or there are no buckets
        """
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        state = self.repository.load()
        allocations = split_income(state.accounts, amount)
        if not allocations:
            raise ValidationError("No accounts to allocate to. Run 'profitfirst account init' first")
        transaction = Transaction(
            id=str(uuid.uuid4()),
            date=date or utc_now(),
            description=description or DEFAULT_DESCRIPTION,
            total_amount=amount,
            allocations=allocations,
        )
        self.repository.commit(TransactionAdded(transaction))
        return transaction

    def create_distribution(
        self, notes: Optional[str] = None, date: Optional[datetime] = None
    ) -> ProfitDistribution:
        """Withdraw half of the Profit bucket, split evenly between owners and company.

        Raises:
            ValidationError: If there is no positive profit to distribute
        """
        state = self.repository.load()
        profit = state.account_of_type(AccountType.PROFIT)
        if profit is None or profit.balance <= 0:
            raise ValidationError("No profit available to distribute")
        when = date or utc_now()
        distribution_amount, to_owners, to_company = split_profit(profit.balance)
        distribution = ProfitDistribution(
            id=str(uuid.uuid4()),
            date=when,
            quarter=quarter_label(when),
            total_profit=profit.balance,
            distribution_amount=distribution_amount,
            to_owners=to_owners,
            to_company=to_company,
            notes=notes or None,
            is_completed=False,
        )
        self.repository.commit(DistributionAdded(distribution))
        return distribution

    def toggle_distribution(self, distribution_id: str) -> ProfitDistribution:
        """Flip the completion flag of a distribution and return it."""
        state = self.repository.commit(DistributionToggled(distribution_id))
        for distribution in state.profit_distributions:
            if distribution.id == distribution_id:
                return distribution
        raise NotFoundError(distribution_not_found(distribution_id))

    def set_target_percentages(self, targets: Mapping[AccountType, Decimal]) -> AppState:
        """Set bucket targets by type.

        Every allocation bucket must be given and the targets must sum to 100.

        Raises:
            ValidationError: If targets are out of range, incomplete, or don't sum to 100
            NotFoundError: If a bucket type has no account
        """
        missing = [t.value for t in ALLOCATION_TYPES if t not in targets]
        if missing:
            raise ValidationError(f"Missing target for: {', '.join(missing)}")
        for account_type, pct in targets.items():
            if account_type == AccountType.INCOME:
                raise ValidationError("INCOME does not take a target percentage")
            if pct < 0 or pct > HUNDRED:
                raise ValidationError(f"Target for {account_type.value} must be between 0 and 100")
        total = sum(targets.values(), Decimal("0"))
        if total != HUNDRED:
            raise ValidationError(f"Targets must sum to 100, got {total}")

        state = self.repository.load()
        by_account: dict[str, Decimal] = {}
        for account_type, pct in targets.items():
            account = state.account_of_type(account_type)
            if account is None:
                raise NotFoundError(account_not_found(account_type.value))
            by_account[account.id] = pct
        return self.repository.commit(TargetsUpdated(by_account))

    def set_currency(self, currency_symbol: str) -> AppState:
        symbol = currency_symbol.strip()
        if not symbol:
            raise ValidationError("Currency symbol cannot be empty")
        return self.repository.commit(CurrencyChanged(symbol))

    def export_payload(self, now: Optional[datetime] = None) -> dict[str, Any]:
        """Return the working set as an import-compatible payload with ``exportDate``."""
        payload = state_to_payload(self.repository.load())
        payload["exportDate"] = format_iso(now or utc_now())
        return payload

    def add_bank_account(
        self,
        bank_name: str,
        branch_name: str = "",
        account_number: str = "",
        account_type: str = "",
        routing_number: Optional[str] = None,
        swift_code: Optional[str] = None,
    ) -> BankAccount:
        if not bank_name.strip():
            raise ValidationError("Bank name cannot be empty")
        bank_account = BankAccount(
            id=str(uuid.uuid4()),
            bank_name=bank_name.strip(),
            branch_name=branch_name,
            account_number=account_number,
            account_type=account_type,
            created_at=utc_now(),
            routing_number=routing_number or None,
            swift_code=swift_code or None,
        )
        self.repository.commit(BankAccountAdded(bank_account))
        return bank_account

    def remove_bank_account(self, bank_account_id: str) -> AppState:
        """Delete a bank account; buckets linked to it become unlinked."""
        return self.repository.commit(BankAccountRemoved(bank_account_id))

    def link_bank_account(self, account: str, bank_account_id: Optional[str]) -> AppState:
        """Link a bucket (by id, type or name) to a bank account, or unlink with None."""
        account_id = resolve_account(self.repository.load().accounts, account)
        return self.repository.commit(BankAccountLinked(account_id, bank_account_id))
