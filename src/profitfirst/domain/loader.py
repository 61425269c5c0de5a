"""Full read-back of an owner's working set from the store."""

from typing import Callable, TypeVar

import structlog

from profitfirst.database.base import Database
from profitfirst.domain.entities import DEFAULT_CURRENCY, AppState
from profitfirst.domain.errors import StoreError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class StateLoader:
    """Loads every entity kind for an owner.

    Each kind is read independently; a kind that fails to load degrades to an
    empty list so the rest of the working set is still usable.
    """

    def __init__(self, db: Database):
        self.db = db

    def _load_kind(self, kind: str, owner_id: str, fetch: Callable[[str], list[T]]) -> list[T]:
        try:
            return fetch(owner_id)
        except StoreError as e:
            logger.warning("load.kind_failed", kind=kind, owner=owner_id, error=str(e))
            return []

    def load_currency(self, owner_id: str) -> str:
        """Return the owner's currency, creating a missing profile."""
        try:
            profile = self.db.get_profile(owner_id)
            if profile is None:
                self.db.create_profile(owner_id)
                logger.info("load.profile_created", owner=owner_id)
                return DEFAULT_CURRENCY
        except StoreError as e:
            logger.warning("load.kind_failed", kind="profile", owner=owner_id, error=str(e))
            return DEFAULT_CURRENCY
        return profile.currency_symbol or DEFAULT_CURRENCY

    def load(self, owner_id: str) -> AppState:
        """Read accounts, transactions, bank accounts, distributions and currency."""
        state = AppState(
            currency_symbol=self.load_currency(owner_id),
            accounts=tuple(self._load_kind("accounts", owner_id, self.db.list_accounts)),
            transactions=tuple(
                self._load_kind("transactions", owner_id, self.db.list_transactions)
            ),
            bank_accounts=tuple(
                self._load_kind("bank accounts", owner_id, self.db.list_bank_accounts)
            ),
            profit_distributions=tuple(
                self._load_kind(
                    "profit distributions", owner_id, self.db.list_profit_distributions
                )
            ),
        )
        logger.debug(
            "load.completed",
            owner=owner_id,
            accounts=len(state.accounts),
            transactions=len(state.transactions),
        )
        return state
