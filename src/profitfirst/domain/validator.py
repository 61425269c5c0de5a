"""Import payload validation.

Validation never raises and never touches storage: it returns findings and
leaves the commit decision to the caller. Any ``error`` finding blocks the
commit; ``warning`` findings are reported but do not block.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from profitfirst.domain.entities import AccountType
from profitfirst.utils.amount_parser import is_number, to_decimal
from profitfirst.utils.date_parser import parse_iso_datetime

# Allowed absolute difference between a transaction total and the sum of its
# allocations. Legacy spreadsheet data is rounded per bucket.
ALLOCATION_TOLERANCE = Decimal("0.1")

ACCOUNT_TYPES = {t.value for t in AccountType}


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Finding:
    """A single validation finding."""

    severity: Severity
    message: str
    path: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        location = f"{self.path}: " if self.path else ""
        return f"{self.severity.value}: {location}{self.message}"


@dataclass(frozen=True)
class ValidationReport:
    """All findings for one payload."""

    findings: tuple[Finding, ...]

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _error(message: str, path: str = "") -> Finding:
    return Finding(Severity.ERROR, message, path)


def _warning(message: str, path: str = "") -> Finding:
    return Finding(Severity.WARNING, message, path)


def _is_date(value: Any) -> bool:
    try:
        parse_iso_datetime(value)
    except ValueError:
        return False
    return True


def _optional_number(record: dict[str, Any], key: str, label: str, path: str) -> list[Finding]:
    value = record.get(key)
    if value is None or is_number(value):
        return []
    return [_error(f"{label} {value!r} is not a number", path)]


def _validate_structure(payload: Any) -> list[Finding]:
    if not isinstance(payload, dict):
        return [_error("Invalid data format: payload must be an object")]
    for key in ("accounts", "transactions"):
        if not isinstance(payload.get(key), list):
            return [_error(f"Invalid data format: {key} array is required", key)]
    for key in ("bankAccounts", "profitDistributions"):
        if key in payload and payload[key] is not None and not isinstance(payload[key], list):
            return [_error(f"Invalid data format: {key} must be an array", key)]
    return []


def _validate_accounts(accounts: list[Any]) -> list[Finding]:
    findings = []
    seen_types: set[str] = set()
    for index, account in enumerate(accounts):
        path = f"accounts[{index}]"
        if not isinstance(account, dict):
            findings.append(_error("Account must be an object", path))
            continue
        if not account.get("id"):
            findings.append(_error("Account is missing an id", path))
        account_type = account.get("type")
        if not account_type:
            findings.append(_error("Account is missing a type", path))
        elif not isinstance(account_type, str) or account_type not in ACCOUNT_TYPES:
            findings.append(_error(f"Unknown account type '{account_type}'", path))
        target = account.get("targetPercentage")
        if target is not None:
            if not is_number(target):
                findings.append(_error(f"Target percentage {target!r} is not a number", path))
            elif not 0 <= to_decimal(target) <= 100:
                findings.append(
                    _error(f"Target percentage {target} is outside 0-100", path)
                )
        findings.extend(_optional_number(account, "currentPercentage", "Current percentage", path))
        findings.extend(_optional_number(account, "balance", "Balance", path))
        if isinstance(account_type, str) and account_type in ACCOUNT_TYPES:
            if account_type in seen_types:
                findings.append(
                    _warning(
                        f"More than one {account_type} account; extra ones are kept as new buckets",
                        path,
                    )
                )
            seen_types.add(account_type)
    return findings


def _validate_allocations(
    transaction: dict[str, Any], path: str, account_ids: set[str]
) -> list[Finding]:
    allocations = transaction.get("allocations")
    if allocations is None:
        allocations = []
    if not isinstance(allocations, list):
        return [_error("Allocations must be an array", path)]

    findings = []
    allocated = Decimal("0")
    sum_known = True
    for alloc_index, allocation in enumerate(allocations):
        alloc_path = f"{path}.allocations[{alloc_index}]"
        if not isinstance(allocation, dict):
            findings.append(_error("Allocation must be an object", alloc_path))
            sum_known = False
            continue
        account_id = allocation.get("accountId")
        if not isinstance(account_id, (str, int)) or str(account_id) not in account_ids:
            findings.append(
                _error(f"Allocation references unknown account '{account_id}'", alloc_path)
            )
        amount = allocation.get("amount")
        if is_number(amount):
            allocated += to_decimal(amount)
        else:
            findings.append(_error(f"Allocation amount {amount!r} is not a number", alloc_path))
            sum_known = False

    total = transaction.get("totalAmount")
    if sum_known and is_number(total):
        total = to_decimal(total)
        if abs(allocated - total) > ALLOCATION_TOLERANCE:
            findings.append(
                _warning(
                    f"Allocations sum to {allocated} but total amount is {total}",
                    path,
                )
            )
    return findings


def _validate_transactions(transactions: list[Any], account_ids: set[str]) -> list[Finding]:
    findings = []
    seen: set[str] = set()
    for index, transaction in enumerate(transactions):
        path = f"transactions[{index}]"
        if not isinstance(transaction, dict):
            findings.append(_error("Transaction must be an object", path))
            continue

        transaction_id = transaction.get("id")
        if not transaction_id:
            findings.append(_error("Transaction is missing an id", path))
        elif str(transaction_id) in seen:
            findings.append(_warning(f"Duplicate transaction id '{transaction_id}'", path))
        else:
            seen.add(str(transaction_id))

        date = transaction.get("date")
        if not date:
            findings.append(_error("Transaction is missing a date", path))
        elif not _is_date(date):
            findings.append(_error(f"Transaction date {date!r} is not ISO-8601", path))

        if not is_number(transaction.get("totalAmount")):
            findings.append(
                _error(
                    f"Transaction total amount {transaction.get('totalAmount')!r} is not a number",
                    path,
                )
            )

        findings.extend(_validate_allocations(transaction, path, account_ids))
    return findings


def _validate_distributions(distributions: list[Any]) -> list[Finding]:
    findings = []
    for index, distribution in enumerate(distributions):
        path = f"profitDistributions[{index}]"
        if not isinstance(distribution, dict):
            findings.append(_error("Profit distribution must be an object", path))
            continue
        if not distribution.get("id"):
            findings.append(_error("Profit distribution is missing an id", path))
        date = distribution.get("date")
        if not date or not _is_date(date):
            findings.append(_error(f"Profit distribution date {date!r} is not ISO-8601", path))
        if not is_number(distribution.get("distributionAmount")):
            findings.append(
                _error(
                    "Profit distribution amount "
                    f"{distribution.get('distributionAmount')!r} is not a number",
                    path,
                )
            )
        findings.extend(_optional_number(distribution, "totalProfit", "Total profit", path))
        findings.extend(_optional_number(distribution, "toOwners", "Amount to owners", path))
        findings.extend(_optional_number(distribution, "toCompany", "Amount to company", path))
    return findings


def _validate_bank_accounts(bank_accounts: list[Any]) -> list[Finding]:
    findings = []
    for index, bank_account in enumerate(bank_accounts):
        path = f"bankAccounts[{index}]"
        if not isinstance(bank_account, dict):
            findings.append(_error("Bank account must be an object", path))
            continue
        if not bank_account.get("id"):
            findings.append(_error("Bank account is missing an id", path))
        if not bank_account.get("bankName"):
            findings.append(_error("Bank account is missing a bank name", path))
        created_at = bank_account.get("createdAt")
        if created_at and not _is_date(created_at):
            findings.append(_error(f"Bank account createdAt {created_at!r} is not ISO-8601", path))
    return findings


def validate_payload(payload: Any) -> list[Finding]:
    """Validate an import payload.

    Args:
        payload: Decoded JSON document (any type)

    Returns:
        Findings in payload order. A structural problem yields exactly one
        error and no further checks.
    """
    structural = _validate_structure(payload)
    if structural:
        return structural

    accounts = payload["accounts"]
    account_ids = {
        str(acc["id"]) for acc in accounts if isinstance(acc, dict) and acc.get("id")
    }

    findings = []
    findings.extend(_validate_accounts(accounts))
    findings.extend(_validate_transactions(payload["transactions"], account_ids))
    findings.extend(_validate_distributions(payload.get("profitDistributions") or []))
    findings.extend(_validate_bank_accounts(payload.get("bankAccounts") or []))
    return findings


def build_report(payload: Any) -> ValidationReport:
    """Validate a payload and wrap the findings in a report."""
    return ValidationReport(findings=tuple(validate_payload(payload)))
