"""State repositories: where the effect of an event is persisted.

``LocalStateRepository`` keeps the whole working set in the local cache
(anonymous use). ``RemoteStateRepository`` writes the rows an event touched
to the store and then re-fetches, so the returned state is always what the
store holds.
"""

from abc import ABC, abstractmethod

import structlog

from profitfirst.database.base import Database
from profitfirst.database.local_cache import LocalCache
from profitfirst.domain.entities import Account, AppState
from profitfirst.domain.errors import NotFoundError
from profitfirst.domain.loader import StateLoader
from profitfirst.domain.state import (
    AccountsSeeded,
    BankAccountAdded,
    BankAccountLinked,
    BankAccountRemoved,
    CurrencyChanged,
    DistributionAdded,
    DistributionToggled,
    Event,
    TargetsUpdated,
    TransactionAdded,
    apply_event,
)

logger = structlog.get_logger(__name__)


class StateRepository(ABC):
    """Loads the working set and persists events against it."""

    @abstractmethod
    def load(self) -> AppState:
        """Return the current working set."""
        pass

    @abstractmethod
    def commit(self, event: Event) -> AppState:
        """Apply and persist ``event``; return the resulting state."""
        pass


class LocalStateRepository(StateRepository):
    def __init__(self, cache: LocalCache):
        self.cache = cache

    def load(self) -> AppState:
        return self.cache.load_state()

    def commit(self, event: Event) -> AppState:
        state = apply_event(self.load(), event)
        self.cache.save_state(state)
        return state


def _changed_accounts(before: AppState, after: AppState) -> list[Account]:
    previous = {acc.id: acc for acc in before.accounts}
    return [acc for acc in after.accounts if previous.get(acc.id) != acc]


class RemoteStateRepository(StateRepository):
    def __init__(self, db: Database, owner_id: str):
        self.db = db
        self.owner_id = owner_id
        self.loader = StateLoader(db)

    def load(self) -> AppState:
        return self.loader.load(self.owner_id)

    def _persist(self, before: AppState, after: AppState, event: Event) -> None:
        owner_id = self.owner_id
        if isinstance(event, AccountsSeeded):
            if not before.accounts:
                self.db.insert_accounts(owner_id, after.accounts)
            return
        if isinstance(event, TransactionAdded):
            self.db.insert_transactions(owner_id, [event.transaction])
        elif isinstance(event, DistributionAdded):
            if after is before:
                return
            self.db.insert_profit_distributions(owner_id, [event.distribution])
        elif isinstance(event, DistributionToggled):
            toggled = next(d for d in after.profit_distributions if d.id == event.distribution_id)
            self.db.set_distribution_completed(owner_id, toggled.id, toggled.is_completed)
        elif isinstance(event, CurrencyChanged):
            try:
                self.db.update_profile_currency(owner_id, event.currency_symbol)
            except NotFoundError:
                self.db.create_profile(owner_id, event.currency_symbol)
        elif isinstance(event, BankAccountAdded):
            self.db.insert_bank_accounts(owner_id, [event.bank_account])
        elif isinstance(event, BankAccountRemoved):
            self.db.delete_bank_account(owner_id, event.bank_account_id)
            return
        elif not isinstance(event, (TargetsUpdated, BankAccountLinked)):
            raise TypeError(f"Unknown event: {event!r}")

        changed = _changed_accounts(before, after)
        if changed:
            self.db.upsert_accounts(owner_id, changed)

    def commit(self, event: Event) -> AppState:
        before = self.load()
        after = apply_event(before, event)
        with self.db.unit_of_work():
            self._persist(before, after, event)
        logger.debug("repository.committed", owner=self.owner_id, event_type=type(event).__name__)
        return self.load()
