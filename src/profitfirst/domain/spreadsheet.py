"""Spreadsheet (CSV) import parser.

Turns a loosely formatted Profit First spreadsheet export into the import
payload shape. Column meaning is positional:

    date | revenue | profit | . | owners comp | . | tax | . | opex

Quarter blocks end with a "Distribution" row whose quarter label sits in the
first cell of the row just above it.
"""

import csv
import io
import re
from decimal import Decimal
from typing import Any, Iterable, Optional

import structlog

from profitfirst.domain.entities import ALLOCATION_TYPES, Account, AccountType
from profitfirst.domain.payload import account_to_payload
from profitfirst.utils.amount_parser import parse_sheet_amount
from profitfirst.utils.date_parser import (
    MONTHS,
    SHEET_DATE_PATTERN,
    format_iso,
    parse_sheet_date,
    quarter_end,
)

logger = structlog.get_logger(__name__)

NOISE_MARKERS = ("Profit First", "Term")
QUARTER_TOKEN = re.compile(r"^Q\d?$")
QUARTER_DIGIT = re.compile(r"Q([1-4])")
FOUR_DIGIT_YEAR = re.compile(r"\d{4}")

# 0-based column of each bucket amount in a revenue row.
ALLOCATION_COLUMNS = {
    AccountType.PROFIT: 2,
    AccountType.OWNERS_COMP: 4,
    AccountType.TAX: 6,
    AccountType.OPEX: 8,
}
REVENUE_COLUMN = 1
DISTRIBUTION_COLUMN = 1


def _cell(row: list[str], index: int) -> str:
    return row[index].strip() if index < len(row) and row[index] else ""


def _is_noise(first_cell: str) -> bool:
    if any(marker in first_cell for marker in NOISE_MARKERS):
        return True
    return any(QUARTER_TOKEN.match(token) for token in first_cell.split())


def _plain_number(amount: Decimal) -> str:
    return format(amount.normalize(), "f")


def read_rows(content: str) -> list[list[str]]:
    """Split delimited text into rows, dropping empty ones."""
    sample = content[:1024]
    try:
        dialect: Any = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    rows = []
    for row in csv.reader(io.StringIO(content), dialect):
        if any(cell.strip() for cell in row):
            rows.append(row)
    return rows


class SpreadsheetParser:
    """Parser for Profit First spreadsheet exports."""

    def __init__(self, accounts: Iterable[Account], currency_symbol: str = "USD"):
        """Initialize parser.

        Args:
            accounts: The owner's current accounts; allocations are resolved
                to these ids by bucket type and they are passed through
                unchanged into the payload.
            currency_symbol: Currency symbol carried into the payload
        """
        self.accounts = list(accounts)
        self.currency_symbol = currency_symbol
        self.account_ids: dict[AccountType, str] = {}
        for acc in self.accounts:
            self.account_ids.setdefault(acc.type, acc.id)

    def parse(self, content: str) -> dict[str, Any]:
        """Parse spreadsheet text into an import payload.

        Malformed cells never raise here; they become zeros or skipped rows
        and are left for the validator to judge.
        """
        rows = read_rows(content)
        transactions = []
        distributions = []

        for index, row in enumerate(rows):
            first = _cell(row, 0)
            if not first or _is_noise(first):
                continue

            if SHEET_DATE_PATTERN.match(first) and _cell(row, REVENUE_COLUMN):
                # Date-shaped cells with an unknown month or impossible day
                # still claim the row; they just never produce a transaction.
                transaction = self.parse_revenue_row(row)
                if transaction is not None:
                    transactions.append(transaction)
                continue

            if "Distribution" in first:
                previous = _cell(rows[index - 1], 0) if index > 0 else ""
                distribution = self.parse_distribution_row(row, previous)
                if distribution is not None:
                    distributions.append(distribution)

        logger.debug(
            "spreadsheet.parsed",
            rows=len(rows),
            transactions=len(transactions),
            distributions=len(distributions),
        )
        return {
            "accounts": [account_to_payload(acc) for acc in self.accounts],
            "transactions": transactions,
            "profitDistributions": distributions,
            "bankAccounts": [],
            "currencySymbol": self.currency_symbol,
        }

    def parse_revenue_row(self, row: list[str]) -> Optional[dict[str, Any]]:
        """Build a transaction candidate from a dated revenue row."""
        date = parse_sheet_date(_cell(row, 0))
        if date is None:
            return None
        revenue = parse_sheet_amount(_cell(row, REVENUE_COLUMN))
        if revenue <= 0:
            return None

        allocations = []
        for account_type in ALLOCATION_TYPES:
            account_id = self.account_ids.get(account_type)
            if account_id is None:
                continue
            amount = parse_sheet_amount(_cell(row, ALLOCATION_COLUMNS[account_type]))
            allocations.append({"accountId": account_id, "amount": amount})

        iso_date = format_iso(date)
        month_name = next(name for name, number in MONTHS.items() if number == date.month)
        return {
            "id": f"tx-{iso_date}-{_plain_number(revenue)}",
            "date": iso_date,
            "description": f"{month_name} {date.year} Revenue",
            "totalAmount": revenue,
            "allocations": allocations,
        }

    def parse_distribution_row(
        self, row: list[str], quarter_cell: str
    ) -> Optional[dict[str, Any]]:
        """Build a distribution candidate from a "Distribution" marker row."""
        amount = parse_sheet_amount(_cell(row, DISTRIBUTION_COLUMN))
        if amount <= 0:
            return None
        quarter_match = QUARTER_DIGIT.search(quarter_cell)
        year_match = FOUR_DIGIT_YEAR.search(quarter_cell)
        if quarter_match is None or year_match is None:
            return None

        quarter = int(quarter_match.group(1))
        year = int(year_match.group(0))
        half = amount / 2
        label = f"Q{quarter} {year}"
        return {
            "id": f"dist-{year}-q{quarter}",
            "date": format_iso(quarter_end(quarter, year)),
            "quarter": label,
            # Policy fixes the distribution at 50% of profit.
            "totalProfit": amount * 2,
            "distributionAmount": amount,
            "toOwners": half,
            "toCompany": half,
            "notes": f"{label} Distribution",
            "isCompleted": True,
        }


def parse_spreadsheet(
    content: str, accounts: Iterable[Account], currency_symbol: str = "USD"
) -> dict[str, Any]:
    """Parse spreadsheet text into an import payload."""
    return SpreadsheetParser(accounts, currency_symbol).parse(content)
