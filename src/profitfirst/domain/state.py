"""State transitions for the in-memory working set.

Every mutation is an event applied by :func:`apply_event`, a pure function
``(state, event) -> state``. Persisting the effect of an event is the job of
a state repository (see ``profitfirst.domain.repository``); nothing here
touches storage.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Mapping, Optional, Union

from profitfirst.domain.entities import (
    Account,
    AccountType,
    AppState,
    BankAccount,
    ProfitDistribution,
    Transaction,
)
from profitfirst.domain.errors import (
    NotFoundError,
    account_not_found,
    bank_account_not_found,
    distribution_not_found,
)

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class AccountsSeeded:
    accounts: tuple[Account, ...]


@dataclass(frozen=True)
class TransactionAdded:
    transaction: Transaction


@dataclass(frozen=True)
class DistributionAdded:
    distribution: ProfitDistribution


@dataclass(frozen=True)
class DistributionToggled:
    distribution_id: str


@dataclass(frozen=True)
class TargetsUpdated:
    # account id -> target percentage
    targets: Mapping[str, Decimal]


@dataclass(frozen=True)
class CurrencyChanged:
    currency_symbol: str


@dataclass(frozen=True)
class BankAccountAdded:
    bank_account: BankAccount


@dataclass(frozen=True)
class BankAccountRemoved:
    bank_account_id: str


@dataclass(frozen=True)
class BankAccountLinked:
    account_id: str
    bank_account_id: Optional[str]


Event = Union[
    AccountsSeeded,
    TransactionAdded,
    DistributionAdded,
    DistributionToggled,
    TargetsUpdated,
    CurrencyChanged,
    BankAccountAdded,
    BankAccountRemoved,
    BankAccountLinked,
]


def with_current_percentages(accounts: tuple[Account, ...]) -> tuple[Account, ...]:
    """Recompute CAPS: each bucket's share of the non-INCOME balance total."""
    total = sum(
        (acc.balance for acc in accounts if acc.type != AccountType.INCOME),
        Decimal("0"),
    )
    result = []
    for acc in accounts:
        if acc.type == AccountType.INCOME or total <= 0:
            current = Decimal("0")
        else:
            current = (acc.balance / total * HUNDRED).quantize(Decimal("0.01"))
        result.append(replace(acc, current_percentage=current))
    return tuple(result)


def seed_accounts(state: AppState, accounts: tuple[Account, ...]) -> AppState:
    """Install default accounts; a no-op when the state already has any."""
    if state.accounts:
        return state
    return replace(state, accounts=tuple(accounts))


def add_transaction(state: AppState, transaction: Transaction) -> AppState:
    """Prepend a transaction and credit each allocated bucket."""
    credits: dict[str, Decimal] = {}
    for allocation in transaction.allocations:
        credits[allocation.account_id] = (
            credits.get(allocation.account_id, Decimal("0")) + allocation.amount
        )
    accounts = tuple(
        replace(acc, balance=acc.balance + credits[acc.id]) if acc.id in credits else acc
        for acc in state.accounts
    )
    return replace(
        state,
        transactions=(transaction,) + state.transactions,
        accounts=with_current_percentages(accounts),
    )


def add_profit_distribution(state: AppState, distribution: ProfitDistribution) -> AppState:
    """Record a distribution and debit the PROFIT bucket by its amount.

    Without a PROFIT account the state is returned unchanged.
    """
    if state.account_of_type(AccountType.PROFIT) is None:
        return state
    accounts = tuple(
        replace(acc, balance=acc.balance - distribution.distribution_amount)
        if acc.type == AccountType.PROFIT
        else acc
        for acc in state.accounts
    )
    return replace(
        state,
        profit_distributions=(distribution,) + state.profit_distributions,
        accounts=with_current_percentages(accounts),
    )


def toggle_distribution_complete(state: AppState, distribution_id: str) -> AppState:
    if not any(d.id == distribution_id for d in state.profit_distributions):
        raise NotFoundError(distribution_not_found(distribution_id))
    return replace(
        state,
        profit_distributions=tuple(
            replace(d, is_completed=not d.is_completed) if d.id == distribution_id else d
            for d in state.profit_distributions
        ),
    )


def update_targets(state: AppState, targets: Mapping[str, Decimal]) -> AppState:
    known = {acc.id for acc in state.accounts}
    for account_id in targets:
        if account_id not in known:
            raise NotFoundError(account_not_found(account_id))
    return replace(
        state,
        accounts=tuple(
            replace(acc, target_percentage=targets[acc.id]) if acc.id in targets else acc
            for acc in state.accounts
        ),
    )


def remove_bank_account(state: AppState, bank_account_id: str) -> AppState:
    """Delete a bank account and unlink it from every bucket."""
    if not any(ba.id == bank_account_id for ba in state.bank_accounts):
        raise NotFoundError(bank_account_not_found(bank_account_id))
    return replace(
        state,
        bank_accounts=tuple(ba for ba in state.bank_accounts if ba.id != bank_account_id),
        accounts=tuple(
            replace(acc, bank_account_id=None) if acc.bank_account_id == bank_account_id else acc
            for acc in state.accounts
        ),
    )


def link_bank_account(
    state: AppState, account_id: str, bank_account_id: Optional[str]
) -> AppState:
    if not any(acc.id == account_id for acc in state.accounts):
        raise NotFoundError(account_not_found(account_id))
    if bank_account_id is not None and not any(
        ba.id == bank_account_id for ba in state.bank_accounts
    ):
        raise NotFoundError(bank_account_not_found(bank_account_id))
    return replace(
        state,
        accounts=tuple(
            replace(acc, bank_account_id=bank_account_id) if acc.id == account_id else acc
            for acc in state.accounts
        ),
    )


def apply_event(state: AppState, event: Event) -> AppState:
    """Return the state that results from applying ``event`` to ``state``.

    Raises:
        NotFoundError: If the event references an entity missing from state
        TypeError: If the event type is unknown
    """
    if isinstance(event, AccountsSeeded):
        return seed_accounts(state, event.accounts)
    if isinstance(event, TransactionAdded):
        return add_transaction(state, event.transaction)
    if isinstance(event, DistributionAdded):
        return add_profit_distribution(state, event.distribution)
    if isinstance(event, DistributionToggled):
        return toggle_distribution_complete(state, event.distribution_id)
    if isinstance(event, TargetsUpdated):
        return update_targets(state, event.targets)
    if isinstance(event, CurrencyChanged):
        return replace(state, currency_symbol=event.currency_symbol)
    if isinstance(event, BankAccountAdded):
        return replace(state, bank_accounts=state.bank_accounts + (event.bank_account,))
    if isinstance(event, BankAccountRemoved):
        return remove_bank_account(state, event.bank_account_id)
    if isinstance(event, BankAccountLinked):
        return link_bank_account(state, event.account_id, event.bank_account_id)
    raise TypeError(f"Unknown event: {event!r}")
