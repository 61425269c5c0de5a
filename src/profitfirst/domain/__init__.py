"""Domain layer for profitfirst application."""

from profitfirst.domain.entities import (
    Account,
    AccountType,
    Allocation,
    AppState,
    BankAccount,
    Profile,
    ProfitDistribution,
    Transaction,
)

__all__ = [
    "Account",
    "AccountType",
    "Allocation",
    "AppState",
    "BankAccount",
    "Profile",
    "ProfitDistribution",
    "Transaction",
]
