"""Utility functions for profitfirst."""

from profitfirst.utils.date_parser import parse_iso_datetime, parse_sheet_date, format_iso
from profitfirst.utils.amount_parser import parse_amount, parse_sheet_amount, to_decimal
from profitfirst.utils.account_resolver import resolve_account

__all__ = [
    "parse_iso_datetime",
    "parse_sheet_date",
    "format_iso",
    "parse_amount",
    "parse_sheet_amount",
    "to_decimal",
    "resolve_account",
]
