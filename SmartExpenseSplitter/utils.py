"""
Utilities Module

Money arithmetic and the small parsing/formatting helpers shared by the
ledger, the settlement engine and the shells.

Money is always a Decimal quantized to two places with ROUND_HALF_UP.
Floats are never used for money values.

Functions:
    to_money: Convert a number or numeric string to a 2-place Decimal.
    divide_money: Divide money by a count, rounding half up.
    parse_amount: Parse shell input into a Decimal amount.
    parse_names: Split a comma-delimited list of names.
    format_currency: Format an amount with a currency symbol.
    describe_balance: Human-readable owed/owes/settled line.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from errors import InvalidAmount


CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """
    Convert a value to a Decimal rounded to 2 decimal places.

    Floats go through str() first so 0.1 becomes Decimal("0.10") rather
    than its binary expansion.

    Args:
        value: Decimal, int, float or numeric string.

    Returns:
        Decimal: Value quantized to 0.01 with ROUND_HALF_UP.

    Raises:
        InvalidAmount: If the value is not a number, is not finite, or has
            too many digits to be held to the cent.
    """
    try:
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmount(value) from None


def divide_money(amount: Decimal, count: int) -> Decimal:
    """Divide amount by count and round the quotient half up to cents."""
    return (amount / Decimal(count)).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(text) -> Decimal:
    """
    Parse user input into a money amount.

    Accepts an optional leading currency symbol and thousands separators
    ("$1,250.50"). Sign is kept; positivity is checked by the ledger.

    Raises:
        InvalidAmount: If the text is not a finite decimal number.
    """
    if isinstance(text, (Decimal, int, float)):
        cleaned = str(text)
    else:
        cleaned = str(text).strip().lstrip("$").replace(",", "")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmount(text) from None
    if not amount.is_finite():
        raise InvalidAmount(text)
    try:
        return to_money(amount)
    except InvalidAmount:
        raise InvalidAmount(text) from None


def parse_names(text: str) -> list[str]:
    """Split "A, B ,C" into ["A", "B", "C"], dropping empty entries."""
    return [name.strip() for name in text.split(",") if name.strip()]


def format_currency(amount, symbol: str = "$") -> str:
    """
    Format a monetary amount with the given currency symbol.

    Returns:
        str: Formatted string like "$1,234.56". Negative amounts keep their
        sign in front of the symbol ("-$5.00").
    """
    amount = to_money(amount)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def describe_balance(name: str, balance, symbol: str = "$") -> str:
    """Return "A is owed: $5.00", "A owes: $5.00" or "A is settled up"."""
    balance = to_money(balance)
    if balance > 0:
        return f"{name} is owed: {format_currency(balance, symbol)}"
    if balance < 0:
        return f"{name} owes: {format_currency(-balance, symbol)}"
    return f"{name} is settled up"
