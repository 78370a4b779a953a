"""
Money Utilities
Amounts are held as integer paise and rendered as two-decimal strings
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


def to_paise(value):
    """
    Parse a rupee amount into integer paise

    Accepts strings ("25.00", "25"), ints (rupees), floats and Decimals.
    Values with more than two decimals are rounded half-up.

    Args:
        value: Amount in rupees

    Returns:
        int: Amount in paise

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f'Invalid amount: {value!r}')

    if isinstance(value, int):
        return value * 100

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f'Invalid amount: {value!r}') from None

    if not amount.is_finite():
        raise ValueError(f'Invalid amount: {value!r}')

    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def format_paise(paise):
    """
    Format paise as a fixed two-decimal string

    Args:
        paise: Integer amount in paise

    Returns:
        str: e.g. 5000 -> "50.00", -250 -> "-2.50"
    """
    sign = '-' if paise < 0 else ''
    rupees, rest = divmod(abs(int(paise)), 100)
    return f"{sign}{rupees}.{rest:02d}"
