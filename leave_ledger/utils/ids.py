"""Identifier generation and shape validation for users and leave requests."""
import uuid
from typing import Any

from fastapi import HTTPException, status


def generate_id() -> str:
    """Return a new random UUID4 in canonical hyphenated form."""
    return str(uuid.uuid4())


def is_valid_id(value: Any) -> bool:
    """
    Check that value is a canonical hyphenated UUID string.

    Examples:
        >>> is_valid_id("0f8fad5b-d9cb-469f-a165-70867728950e")
        True
        >>> is_valid_id("0f8fad5bd9cb469fa16570867728950e")
        False
        >>> is_valid_id(None)
        False
    """
    if not isinstance(value, str):
        return False
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    return str(parsed) == value.lower()


def ensure_valid_id(value: Any, label: str) -> str:
    """
    Reject malformed identifiers before any store lookup.

    Raises:
        HTTPException: 400 if value is not a well-formed id
    """
    if not is_valid_id(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please enter a valid {label} ID"
        )
    return value
