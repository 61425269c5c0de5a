"""Mapper functions to convert between domain models and SQLAlchemy models.

This is the storage naming boundary: ORM rows use the snake_case column
names of the relational schema, domain entities are what the rest of the
application works with. Datetimes come back naive from SQLite and are
re-attached to UTC here.
"""

from decimal import Decimal
from typing import Any

from profitfirst.domain import entities as domain
from profitfirst.database.models import (
    Account as ORMAccount,
    BankAccount as ORMBankAccount,
    Profile as ORMProfile,
    ProfitDistribution as ORMProfitDistribution,
    Transaction as ORMTransaction,
    TransactionAllocation as ORMTransactionAllocation,
)
from profitfirst.utils.date_parser import as_utc


def _decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        target_percentage=_decimal(orm_account.target_percentage),
        current_percentage=_decimal(orm_account.current_percentage),
        balance=_decimal(orm_account.balance),
        bank_account_id=orm_account.bank_account_id,
    )


def account_values(account: domain.Account) -> dict[str, Any]:
    """Column values for a domain Account (without owner)."""
    return {
        "name": account.name,
        "type": account.type.value,
        "target_percentage": account.target_percentage,
        "current_percentage": account.current_percentage,
        "balance": account.balance,
        "bank_account_id": account.bank_account_id,
    }


def bank_account_to_domain(orm_bank_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_bank_account.id,
        bank_name=orm_bank_account.bank_name,
        branch_name=orm_bank_account.branch_name,
        account_number=orm_bank_account.account_number,
        account_type=orm_bank_account.account_type,
        created_at=as_utc(orm_bank_account.created_at),
        routing_number=orm_bank_account.routing_number,
        swift_code=orm_bank_account.swift_code,
    )


def bank_account_values(bank_account: domain.BankAccount) -> dict[str, Any]:
    return {
        "bank_name": bank_account.bank_name,
        "branch_name": bank_account.branch_name,
        "account_number": bank_account.account_number,
        "account_type": bank_account.account_type,
        "routing_number": bank_account.routing_number,
        "swift_code": bank_account.swift_code,
        "created_at": bank_account.created_at,
    }


def allocation_to_domain(orm_allocation: ORMTransactionAllocation) -> domain.Allocation:
    """Convert SQLAlchemy TransactionAllocation model to domain Allocation."""
    return domain.Allocation(
        account_id=orm_allocation.account_id,
        amount=_decimal(orm_allocation.amount),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with allocations) to domain Transaction."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=as_utc(orm_transaction.date),
        description=orm_transaction.description,
        total_amount=_decimal(orm_transaction.total_amount),
        allocations=tuple(allocation_to_domain(a) for a in orm_transaction.allocations),
    )


def transaction_values(transaction: domain.Transaction) -> dict[str, Any]:
    return {
        "date": transaction.date,
        "description": transaction.description,
        "total_amount": transaction.total_amount,
    }


def allocation_rows(transaction: domain.Transaction) -> list[ORMTransactionAllocation]:
    """Build allocation rows for a transaction from its nested allocations."""
    return [
        ORMTransactionAllocation(
            transaction_id=transaction.id,
            account_id=allocation.account_id,
            amount=allocation.amount,
        )
        for allocation in transaction.allocations
    ]


def distribution_to_domain(orm_distribution: ORMProfitDistribution) -> domain.ProfitDistribution:
    """Convert SQLAlchemy ProfitDistribution model to domain ProfitDistribution."""
    return domain.ProfitDistribution(
        id=orm_distribution.id,
        date=as_utc(orm_distribution.date),
        quarter=orm_distribution.quarter,
        total_profit=_decimal(orm_distribution.total_profit),
        distribution_amount=_decimal(orm_distribution.distribution_amount),
        to_owners=_decimal(orm_distribution.to_owners),
        to_company=_decimal(orm_distribution.to_company),
        notes=orm_distribution.notes,
        is_completed=bool(orm_distribution.is_completed),
    )


def distribution_values(distribution: domain.ProfitDistribution) -> dict[str, Any]:
    return {
        "date": distribution.date,
        "quarter": distribution.quarter,
        "total_profit": distribution.total_profit,
        "distribution_amount": distribution.distribution_amount,
        "to_owners": distribution.to_owners,
        "to_company": distribution.to_company,
        "notes": distribution.notes,
        "is_completed": distribution.is_completed,
    }


def profile_to_domain(orm_profile: ORMProfile) -> domain.Profile:
    """Convert SQLAlchemy Profile model to domain Profile entity."""
    return domain.Profile(id=orm_profile.id, currency_symbol=orm_profile.currency_symbol)
