"""CLI display helpers."""

from decimal import Decimal


def format_money(amount: Decimal, currency_symbol: str) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{currency_symbol} {amount:,.2f}"
