"""Utility functions for handling enum/string values safely."""
from enum import Enum


def enum_to_str(v):
    """
    Safely convert enum or string value to string.

    Examples:
        >>> enum_to_str(Role.MANAGER)
        'manager'
        >>> enum_to_str('manager')
        'manager'
        >>> enum_to_str(None)
    """
    if v is None:
        return None
    if isinstance(v, Enum):
        return v.value
    return str(v)
