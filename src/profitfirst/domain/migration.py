"""One-time migration of the local cache into the remote store.

Run on startup (``profitfirst sync``). Status moves through::

    IDLE -> CHECKING -> MIGRATING -> LOADING -> COMPLETE
                     \\------------> LOADING -> COMPLETE

with ERROR as the terminal failure status. Local data is only pushed when
there is some, the cache has not been marked as migrated, and the owner has
no accounts in the store yet; a populated store always wins.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import structlog

from profitfirst.database.base import Database
from profitfirst.database.local_cache import LocalCache
from profitfirst.domain.entities import AppState
from profitfirst.domain.errors import DomainError, MigrationError, NotFoundError
from profitfirst.domain.loader import StateLoader

logger = structlog.get_logger(__name__)


class MigrationStatus(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    MIGRATING = "migrating"
    LOADING = "loading"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class MigrationResult:
    status: MigrationStatus
    state: AppState
    migrated: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == MigrationStatus.COMPLETE


class MigrationOrchestrator:
    """Reconciles the local cache with the remote store for the current owner."""

    def __init__(
        self,
        db: Database,
        cache: LocalCache,
        resolve_owner: Callable[[], Optional[str]],
        on_status: Optional[Callable[[MigrationStatus], None]] = None,
    ):
        self.db = db
        self.cache = cache
        self.resolve_owner = resolve_owner
        self.on_status = on_status
        self.loader = StateLoader(db)
        self.status = MigrationStatus.IDLE

    def _set_status(self, status: MigrationStatus) -> None:
        self.status = status
        logger.debug("migration.status", status=status.value)
        if self.on_status is not None:
            self.on_status(status)

    def _fail(self, state: AppState, error: Exception) -> MigrationResult:
        self._set_status(MigrationStatus.ERROR)
        logger.error("migration.failed", error=str(error))
        return MigrationResult(status=MigrationStatus.ERROR, state=state, error=str(error))

    def should_migrate(self, owner_id: str, local: AppState) -> bool:
        """True when local data exists, was never migrated, and the store is empty."""
        if local.is_empty:
            logger.debug("migration.skipped", owner=owner_id, reason="no local data")
            return False
        if self.cache.is_migrated():
            logger.debug("migration.skipped", owner=owner_id, reason="already migrated")
            return False
        if self.db.count_accounts(owner_id) > 0:
            logger.info("migration.skipped", owner=owner_id, reason="remote has data")
            return False
        return True

    def migrate(self, owner_id: str, local: AppState) -> None:
        """Insert the local working set for ``owner_id`` and set the migrated flag.

        Raises:
            MigrationError: If any insert fails; no rows are kept
        """
        try:
            with self.db.unit_of_work():
                # Bank accounts first: accounts reference them.
                self.db.insert_bank_accounts(owner_id, local.bank_accounts)
                self.db.insert_accounts(owner_id, local.accounts)
                self.db.insert_transactions(owner_id, local.transactions)
                self.db.insert_profit_distributions(owner_id, local.profit_distributions)
                try:
                    self.db.update_profile_currency(owner_id, local.currency_symbol)
                except NotFoundError:
                    self.db.create_profile(owner_id, local.currency_symbol)
        except DomainError as e:
            raise MigrationError(f"Failed to migrate local data: {e}") from e
        self.cache.mark_migrated()
        logger.info(
            "migration.completed",
            owner=owner_id,
            accounts=len(local.accounts),
            transactions=len(local.transactions),
        )

    def run(self) -> MigrationResult:
        """Check, migrate if needed, and load the owner's state.

        Without an owner the local state is returned untouched. Failures are
        reported on the result rather than raised.
        """
        self._set_status(MigrationStatus.CHECKING)
        local = AppState()
        try:
            owner_id = self.resolve_owner()
        except Exception as e:
            return self._fail(local, MigrationError(f"Could not resolve owner: {e}"))

        if owner_id is None:
            try:
                local = self.cache.load_state()
            except DomainError as e:
                logger.warning("migration.cache_unreadable", error=str(e))
            self._set_status(MigrationStatus.COMPLETE)
            return MigrationResult(status=MigrationStatus.COMPLETE, state=local)

        try:
            local = self.cache.load_state()
            migrated = False
            if self.should_migrate(owner_id, local):
                self._set_status(MigrationStatus.MIGRATING)
                self.migrate(owner_id, local)
                migrated = True

            self._set_status(MigrationStatus.LOADING)
            state = self.loader.load(owner_id)
            self.cache.save_state(state)
        except DomainError as e:
            return self._fail(local, e)

        self._set_status(MigrationStatus.COMPLETE)
        return MigrationResult(status=MigrationStatus.COMPLETE, state=state, migrated=migrated)

    def retry(self) -> MigrationResult:
        """Run again from CHECKING, typically after an ERROR."""
        return self.run()
