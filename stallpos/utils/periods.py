"""
Period Utilities
Date-string helpers for the day / week / month summary buckets.
Dates are plain 'YYYY-MM-DD' strings so that range filters can compare them lexically.
"""

import re
from datetime import datetime, timedelta

DATE_FORMAT = '%Y-%m-%d'

_MONTH_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


def parse_date(value):
    """
    Parse a 'YYYY-MM-DD' string

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f'Invalid date {value!r}, expected YYYY-MM-DD')
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f'Invalid date {value!r}, expected YYYY-MM-DD') from None


def format_date(day):
    return day.strftime(DATE_FORMAT)


def week_bounds(value):
    """
    Monday and Sunday of the week containing a date

    Args:
        value: 'YYYY-MM-DD' string

    Returns:
        tuple: (week_start, week_end) as 'YYYY-MM-DD' strings
    """
    day = parse_date(value)
    start = day - timedelta(days=day.weekday())
    return format_date(start), format_date(start + timedelta(days=6))


def month_key(value):
    """'2024-03-04' -> '2024-03'"""
    return value[:7]


def normalize_month(value):
    """
    Accept 'YYYY-MM' or a full date and return 'YYYY-MM'

    Raises:
        ValueError: If the value is neither
    """
    if isinstance(value, str) and len(value) == 10:
        parse_date(value)
        value = value[:7]
    if not isinstance(value, str) or not _MONTH_RE.match(value):
        raise ValueError(f'Invalid month {value!r}, expected YYYY-MM')
    return value


def month_bounds(month):
    """
    String range covering every date of a month

    The upper bound is always '-31'; shorter months have no dates between
    their last day and '-31', so lexical range filters stay exact.
    """
    return f"{month}-01", f"{month}-31"
