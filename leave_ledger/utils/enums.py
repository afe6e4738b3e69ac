"""Utility functions for handling enum/string values safely."""
from enum import Enum
from typing import Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


def enum_to_str(v):
    """
    Safely convert enum or string value to string.

    Examples:
        >>> enum_to_str(LeaveStatus.APPROVED)
        'APPROVED'
        >>> enum_to_str('APPROVED')
        'APPROVED'
        >>> enum_to_str(None)
        None
    """
    if v is None:
        return None
    if isinstance(v, Enum):
        return v.value
    return str(v)


def parse_enum(enum_cls: Type[E], value) -> Optional[E]:
    """Return the enum member whose value equals value, or None if there is none."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None
