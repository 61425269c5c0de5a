"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENT = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥৳]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if is_negative else amount


def parse_sheet_amount(cell: str | None) -> Decimal:
    """Parse a spreadsheet cell leniently.

    Missing or unparseable cells count as zero; correctness of the resulting
    numbers is checked later by the validator.
    """
    if cell is None:
        return Decimal("0")
    try:
        return parse_amount(cell)
    except ValueError:
        return Decimal("0")


def is_number(value: object) -> bool:
    """Return True for JSON-style numbers (bool is not a number here)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == value and value not in (float("inf"), float("-inf"))
    if isinstance(value, Decimal):
        return value.is_finite()
    return False


def to_decimal(value: object) -> Decimal:
    """Convert a payload number to Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1") rather than the
    binary approximation.

    Raises:
        ValueError: If value is not a number
    """
    if not is_number(value):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(amount: Decimal) -> Decimal:
    """Round an amount to cents."""
    return amount.quantize(CENT)
