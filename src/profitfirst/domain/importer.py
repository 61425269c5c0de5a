"""Import engine: validate, resolve, then merge into the store."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable

import structlog

from profitfirst.database.base import Database
from profitfirst.domain.defaults import create_default_accounts
from profitfirst.domain.entities import DEFAULT_CURRENCY, AppState, Allocation
from profitfirst.domain.errors import (
    DomainError,
    ImportCommitError,
    StoreError,
    ValidationError,
    account_type_conflict,
    unresolved_account_reference,
)
from profitfirst.domain.payload import load_payload, state_from_payload
from profitfirst.domain.spreadsheet import parse_spreadsheet
from profitfirst.domain.state import add_profit_distribution, add_transaction
from profitfirst.domain.validator import ValidationReport, build_report

logger = structlog.get_logger(__name__)

SUPPORTED_KINDS = ("json", "csv")


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import attempt."""

    report: ValidationReport
    committed: bool
    counts: dict[str, int] = field(default_factory=dict)


def _counts(state: AppState) -> dict[str, int]:
    return {
        "accounts": len(state.accounts),
        "transactions": len(state.transactions),
        "allocations": sum(len(t.allocations) for t in state.transactions),
        "bank_accounts": len(state.bank_accounts),
        "profit_distributions": len(state.profit_distributions),
    }


class ImportService:
    """Service for importing JSON backups and spreadsheet exports."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db

    def resolve(self, owner_id: str, incoming: AppState) -> AppState:
        """Rewrite incoming account ids onto the owner's existing buckets.

        Phase one maps each incoming account id to the id of the owner's
        existing account of the same type. Only the first incoming account of
        a type takes that id; further ones, and types the owner has no
        account for, keep their incoming id. Phase two rewrites every
        allocation through that map.

        Raises:
            ValidationError: If an allocation references an account that is
                not part of the payload, or a kept id belongs to an existing
                account of another type
        """
        existing = self.db.list_accounts(owner_id)
        ids_by_type = AppState(accounts=tuple(existing)).account_ids_by_type()
        types_by_id = {acc.id: acc.type for acc in existing}

        id_map: dict[str, str] = {}
        claimed: set[str] = set()
        # Ids that already name a bucket of the same type stay put.
        for acc in incoming.accounts:
            if types_by_id.get(acc.id) == acc.type:
                id_map[acc.id] = acc.id
                claimed.add(acc.id)
        for acc in incoming.accounts:
            if acc.id in id_map:
                continue
            target = ids_by_type.get(acc.type)
            if target is None or target in claimed:
                target = acc.id
                known_type = types_by_id.get(target)
                if known_type is not None and known_type != acc.type:
                    raise ValidationError(
                        account_type_conflict(acc.id, known_type.value, acc.type.value)
                    )
            claimed.add(target)
            id_map[acc.id] = target

        accounts = tuple(replace(acc, id=id_map[acc.id]) for acc in incoming.accounts)
        transactions = []
        for txn in incoming.transactions:
            allocations = []
            for allocation in txn.allocations:
                if allocation.account_id not in id_map:
                    raise ValidationError(
                        unresolved_account_reference(txn.id, allocation.account_id)
                    )
                allocations.append(
                    Allocation(account_id=id_map[allocation.account_id], amount=allocation.amount)
                )
            transactions.append(replace(txn, allocations=tuple(allocations)))

        remapped = sum(1 for old, new in id_map.items() if old != new)
        if remapped:
            logger.debug("import.accounts_remapped", owner=owner_id, remapped=remapped)
        return replace(incoming, accounts=accounts, transactions=tuple(transactions))

    def credit_new_activity(self, owner_id: str, state: AppState) -> AppState:
        """Move bucket balances for transactions and distributions new to the store.

        Each new transaction credits its allocations and each new distribution
        debits PROFIT, as if they had been recorded one by one. Rows whose id
        is already stored were counted when they first arrived.
        """
        stored_transactions = {t.id for t in self.db.list_transactions(owner_id)}
        stored_distributions = {d.id for d in self.db.list_profit_distributions(owner_id)}

        ledger = replace(state, transactions=(), profit_distributions=())
        seen: set[str] = set()
        for txn in state.transactions:
            if txn.id in stored_transactions or txn.id in seen:
                continue
            seen.add(txn.id)
            ledger = add_transaction(ledger, txn)
        seen.clear()
        for distribution in state.profit_distributions:
            if distribution.id in stored_distributions or distribution.id in seen:
                continue
            seen.add(distribution.id)
            ledger = add_profit_distribution(ledger, distribution)

        logger.debug(
            "import.balances_credited",
            owner=owner_id,
            transactions=len(ledger.transactions),
            distributions=len(ledger.profit_distributions),
        )
        return replace(state, accounts=ledger.accounts)

    def _save_currency(self, owner_id: str, currency_symbol: str) -> None:
        if self.db.get_profile(owner_id) is None:
            self.db.create_profile(owner_id, currency_symbol)
        else:
            self.db.update_profile_currency(owner_id, currency_symbol)

    def commit(self, owner_id: str, state: AppState) -> None:
        """Merge a resolved state into the store in one unit of work.

        Raises:
            ImportCommitError: If any step fails; nothing is kept
        """
        steps: list[tuple[str, Callable[[], None]]] = [
            ("bank accounts", lambda: self.db.upsert_bank_accounts(owner_id, state.bank_accounts)),
            ("accounts", lambda: self.db.upsert_accounts(owner_id, state.accounts)),
            ("transactions", lambda: self.db.upsert_transactions(owner_id, state.transactions)),
            (
                "transaction allocations",
                lambda: self.db.replace_allocations(owner_id, state.transactions),
            ),
            (
                "profit distributions",
                lambda: self.db.upsert_profit_distributions(owner_id, state.profit_distributions),
            ),
            ("currency", lambda: self._save_currency(owner_id, state.currency_symbol)),
        ]
        try:
            with self.db.unit_of_work():
                for step, action in steps:
                    try:
                        action()
                    except DomainError as e:
                        logger.error("import.step_failed", owner=owner_id, step=step, error=str(e))
                        raise ImportCommitError(step, e) from e
        except StoreError as e:
            raise ImportCommitError("commit", e) from e

    def import_payload(
        self,
        owner_id: str,
        payload: Any,
        dry_run: bool = False,
        credit_balances: bool = False,
    ) -> ImportResult:
        """Validate and merge a payload.

        Args:
            owner_id: Owner receiving the data
            payload: Parsed payload (see ``profitfirst.domain.payload``)
            dry_run: Validate and resolve only; never write
            credit_balances: Apply new transactions and distributions to the
                bucket balances instead of taking the payload balances as-is

        Returns:
            ImportResult; ``committed`` is False when validation found errors
            or when ``dry_run`` is set

        Raises:
            ValidationError: If an allocation cannot be resolved
            ImportCommitError: If a store write fails
        """
        report = build_report(payload)
        for finding in report.warnings:
            logger.warning("import.warning", owner=owner_id, finding=str(finding))
        if not report.is_valid:
            logger.info("import.rejected", owner=owner_id, errors=len(report.errors))
            return ImportResult(report=report, committed=False)

        resolved = self.resolve(owner_id, state_from_payload(payload))
        if credit_balances:
            resolved = self.credit_new_activity(owner_id, resolved)
        counts = _counts(resolved)
        if dry_run:
            return ImportResult(report=report, committed=False, counts=counts)

        self.commit(owner_id, resolved)
        logger.info("import.committed", owner=owner_id, **counts)
        return ImportResult(report=report, committed=True, counts=counts)

    def parse_text(self, owner_id: str, text: str, kind: str) -> Any:
        """Turn raw file content into a payload.

        Spreadsheet rows are allocated against the owner's current buckets,
        or against a fresh default set when the owner has none yet.

        Raises:
            ValidationError: For unsupported kinds or invalid JSON
        """
        if kind == "json":
            return load_payload(text)
        if kind == "csv":
            accounts = self.db.list_accounts(owner_id) or create_default_accounts()
            profile = self.db.get_profile(owner_id)
            currency = (profile and profile.currency_symbol) or DEFAULT_CURRENCY
            return parse_spreadsheet(text, accounts, currency)
        raise ValidationError(
            f"Unsupported file type '{kind}'. Supported: {', '.join(SUPPORTED_KINDS)}"
        )

    def import_text(
        self, owner_id: str, text: str, kind: str, dry_run: bool = False
    ) -> ImportResult:
        """Parse and import raw JSON or spreadsheet text.

        JSON backups carry their own balances; spreadsheet rows are credited
        to the buckets.
        """
        payload = self.parse_text(owner_id, text, kind)
        return self.import_payload(owner_id, payload, dry_run, credit_balances=kind == "csv")

    def import_file(self, owner_id: str, path: str, dry_run: bool = False) -> ImportResult:
        """Import a ``.json`` backup or a ``.csv`` spreadsheet export.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValidationError: For unsupported file types or invalid JSON
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        kind = file_path.suffix.lower().lstrip(".")
        if kind not in SUPPORTED_KINDS:
            raise ValidationError(
                f"Unsupported file type '{file_path.suffix}'. Use a .json or .csv file"
            )
        text = file_path.read_text(encoding="utf-8-sig")
        logger.debug("import.file_read", owner=owner_id, path=str(file_path), kind=kind)
        return self.import_text(owner_id, text, kind, dry_run)
