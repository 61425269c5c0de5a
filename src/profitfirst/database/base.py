"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable, Optional

from profitfirst.domain.entities import (
    Account,
    BankAccount,
    Profile,
    ProfitDistribution,
    Transaction,
)


class Database(ABC):
    """Abstract owner-scoped store for profitfirst.

    Every read and write is filtered by ``owner_id``. Write methods commit
    immediately unless called inside :meth:`unit_of_work`, in which case
    everything commits (or rolls back) together when the block exits.
    Failures are raised as ``StoreError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one atomic commit."""
        pass

    # Account operations
    @abstractmethod
    def count_accounts(self, owner_id: str) -> int:
        """Count the owner's accounts."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: str) -> list[Account]:
        """List the owner's accounts in creation order."""
        pass

    @abstractmethod
    def insert_accounts(self, owner_id: str, accounts: Iterable[Account]) -> None:
        """Insert new accounts; existing ids are an error."""
        pass

    @abstractmethod
    def upsert_accounts(self, owner_id: str, accounts: Iterable[Account]) -> None:
        """Insert or update accounts by id."""
        pass

    # Bank account operations
    @abstractmethod
    def list_bank_accounts(self, owner_id: str) -> list[BankAccount]:
        """List the owner's bank accounts in creation order."""
        pass

    @abstractmethod
    def insert_bank_accounts(self, owner_id: str, bank_accounts: Iterable[BankAccount]) -> None:
        """Insert new bank accounts."""
        pass

    @abstractmethod
    def upsert_bank_accounts(self, owner_id: str, bank_accounts: Iterable[BankAccount]) -> None:
        """Insert or update bank accounts by id."""
        pass

    @abstractmethod
    def delete_bank_account(self, owner_id: str, bank_account_id: str) -> None:
        """Delete a bank account and unlink it from accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def list_transactions(self, owner_id: str) -> list[Transaction]:
        """List the owner's transactions with allocations, newest first."""
        pass

    @abstractmethod
    def insert_transactions(self, owner_id: str, transactions: Iterable[Transaction]) -> None:
        """Insert new transactions together with their allocations."""
        pass

    @abstractmethod
    def upsert_transactions(self, owner_id: str, transactions: Iterable[Transaction]) -> None:
        """Insert or update transaction rows by id (allocations untouched)."""
        pass

    @abstractmethod
    def replace_allocations(self, owner_id: str, transactions: Iterable[Transaction]) -> None:
        """Delete every allocation of the given transactions, then insert theirs."""
        pass

    # Profit distribution operations
    @abstractmethod
    def list_profit_distributions(self, owner_id: str) -> list[ProfitDistribution]:
        """List the owner's profit distributions, newest first."""
        pass

    @abstractmethod
    def insert_profit_distributions(
        self, owner_id: str, distributions: Iterable[ProfitDistribution]
    ) -> None:
        """Insert new profit distributions."""
        pass

    @abstractmethod
    def upsert_profit_distributions(
        self, owner_id: str, distributions: Iterable[ProfitDistribution]
    ) -> None:
        """Insert or update profit distributions by id."""
        pass

    @abstractmethod
    def set_distribution_completed(
        self, owner_id: str, distribution_id: str, is_completed: bool
    ) -> None:
        """Set the completion flag of a distribution."""
        pass

    # Profile operations
    @abstractmethod
    def get_profile(self, owner_id: str) -> Optional[Profile]:
        """Get the owner's profile, or None if missing."""
        pass

    @abstractmethod
    def create_profile(self, owner_id: str, currency_symbol: Optional[str] = None) -> None:
        """Create the owner's profile."""
        pass

    @abstractmethod
    def update_profile_currency(self, owner_id: str, currency_symbol: str) -> None:
        """Update the owner's currency symbol.

        Raises:
            NotFoundError: If the profile row does not exist
        """
        pass
