"""Import/export payload codec.

The payload is the camelCase JSON document produced by export and by the
spreadsheet parser, and consumed by the validator and the import engine::

    {
      "accounts": [{id, name, type, targetPercentage, currentPercentage, balance, bankAccountId?}],
      "transactions": [{id, date, description, totalAmount, allocations: [{accountId, amount}]}],
      "bankAccounts": [{id, bankName, branchName, accountNumber, accountType, routingNumber?, swiftCode?, createdAt}],
      "profitDistributions": [{id, date, quarter, totalProfit, distributionAmount, toOwners, toCompany, notes?, isCompleted}],
      "currencySymbol": "USD"
    }

Decoding functions expect a payload that already passed validation.
"""

import json
from decimal import Decimal
from typing import Any, Optional

from profitfirst.domain.entities import (
    DEFAULT_CURRENCY,
    Account,
    AccountType,
    Allocation,
    AppState,
    BankAccount,
    ProfitDistribution,
    Transaction,
)
from profitfirst.domain.errors import ValidationError
from profitfirst.utils.amount_parser import to_decimal
from profitfirst.utils.date_parser import format_iso, parse_iso_datetime, utc_now


def _decimal(value: Any, default: str = "0") -> Decimal:
    if value is None:
        return Decimal(default)
    return to_decimal(value)


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


# Encoding


def account_to_payload(account: Account) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": account.id,
        "name": account.name,
        "type": account.type.value,
        "targetPercentage": account.target_percentage,
        "currentPercentage": account.current_percentage,
        "balance": account.balance,
    }
    if account.bank_account_id is not None:
        data["bankAccountId"] = account.bank_account_id
    return data


def transaction_to_payload(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "date": format_iso(transaction.date),
        "description": transaction.description,
        "totalAmount": transaction.total_amount,
        "allocations": [
            {"accountId": a.account_id, "amount": a.amount} for a in transaction.allocations
        ],
    }


def bank_account_to_payload(bank_account: BankAccount) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": bank_account.id,
        "bankName": bank_account.bank_name,
        "branchName": bank_account.branch_name,
        "accountNumber": bank_account.account_number,
        "accountType": bank_account.account_type,
        "createdAt": format_iso(bank_account.created_at),
    }
    if bank_account.routing_number is not None:
        data["routingNumber"] = bank_account.routing_number
    if bank_account.swift_code is not None:
        data["swiftCode"] = bank_account.swift_code
    return data


def distribution_to_payload(distribution: ProfitDistribution) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": distribution.id,
        "date": format_iso(distribution.date),
        "quarter": distribution.quarter,
        "totalProfit": distribution.total_profit,
        "distributionAmount": distribution.distribution_amount,
        "toOwners": distribution.to_owners,
        "toCompany": distribution.to_company,
        "isCompleted": distribution.is_completed,
    }
    if distribution.notes is not None:
        data["notes"] = distribution.notes
    return data


def state_to_payload(state: AppState) -> dict[str, Any]:
    """Encode the whole working set as a payload."""
    return {
        "accounts": [account_to_payload(a) for a in state.accounts],
        "transactions": [transaction_to_payload(t) for t in state.transactions],
        "bankAccounts": [bank_account_to_payload(b) for b in state.bank_accounts],
        "profitDistributions": [distribution_to_payload(d) for d in state.profit_distributions],
        "currencySymbol": state.currency_symbol,
    }


# Decoding


def account_from_payload(data: dict[str, Any]) -> Account:
    return Account(
        id=str(data["id"]),
        name=str(data.get("name") or ""),
        type=AccountType(data["type"]),
        target_percentage=_decimal(data.get("targetPercentage")),
        current_percentage=_decimal(data.get("currentPercentage")),
        balance=_decimal(data.get("balance")),
        bank_account_id=_optional_str(data.get("bankAccountId")),
    )


def transaction_from_payload(data: dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(data["id"]),
        date=parse_iso_datetime(data["date"]),
        description=str(data.get("description") or ""),
        total_amount=to_decimal(data["totalAmount"]),
        allocations=tuple(
            Allocation(account_id=str(a["accountId"]), amount=_decimal(a.get("amount")))
            for a in data.get("allocations") or []
        ),
    )


def bank_account_from_payload(data: dict[str, Any]) -> BankAccount:
    created_at = data.get("createdAt")
    return BankAccount(
        id=str(data["id"]),
        bank_name=str(data.get("bankName") or ""),
        branch_name=str(data.get("branchName") or ""),
        account_number=str(data.get("accountNumber") or ""),
        account_type=str(data.get("accountType") or ""),
        created_at=parse_iso_datetime(created_at) if created_at else utc_now(),
        routing_number=_optional_str(data.get("routingNumber")),
        swift_code=_optional_str(data.get("swiftCode")),
    )


def distribution_from_payload(data: dict[str, Any]) -> ProfitDistribution:
    amount = to_decimal(data["distributionAmount"])
    half = amount / 2
    return ProfitDistribution(
        id=str(data["id"]),
        date=parse_iso_datetime(data["date"]),
        quarter=str(data.get("quarter") or ""),
        total_profit=_decimal(data.get("totalProfit"), default=str(amount * 2)),
        distribution_amount=amount,
        to_owners=_decimal(data.get("toOwners"), default=str(half)),
        to_company=_decimal(data.get("toCompany"), default=str(half)),
        notes=_optional_str(data.get("notes")),
        is_completed=bool(data.get("isCompleted", False)),
    )


def state_from_payload(payload: dict[str, Any]) -> AppState:
    """Decode a validated payload into an AppState.

    Raises:
        ValidationError: If a field cannot be decoded
    """
    try:
        return _decode_state(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid payload: {e}") from e


def _decode_state(payload: dict[str, Any]) -> AppState:
    return AppState(
        currency_symbol=payload.get("currencySymbol") or DEFAULT_CURRENCY,
        accounts=tuple(account_from_payload(a) for a in payload.get("accounts") or []),
        transactions=tuple(
            transaction_from_payload(t) for t in payload.get("transactions") or []
        ),
        bank_accounts=tuple(
            bank_account_from_payload(b) for b in payload.get("bankAccounts") or []
        ),
        profit_distributions=tuple(
            distribution_from_payload(d) for d in payload.get("profitDistributions") or []
        ),
    )


# JSON text


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_payload(payload: dict[str, Any]) -> str:
    """Serialize a payload to indented JSON; Decimals become JSON numbers."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)


def load_payload(text: str) -> Any:
    """Parse payload JSON, keeping fractional numbers as Decimal.

    Raises:
        ValidationError: If the text is not valid JSON
    """
    try:
        return json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}")
