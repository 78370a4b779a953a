"""
Helper Utilities
Common utility functions used across the application
"""

import uuid


def new_id():
    """
    Generate a record identifier

    Returns:
        str: Random UUID4 string
    """
    return str(uuid.uuid4())


def parse_limit(value):
    """
    Parse an optional result-count limit from a query string

    Args:
        value: Raw query parameter (None, '', or a positive integer string)

    Returns:
        int or None: Limit, or None when not supplied

    Raises:
        ValueError: If the value is not a positive integer
    """
    if value is None or value == '':
        return None
    limit = int(value)
    if limit < 1:
        raise ValueError('limit must be a positive integer')
    return limit


def take(records, limit=None):
    """Apply an optional limit to an already sorted list"""
    return records[:limit] if limit else records
