"""
Tests for identifier generation and validation
"""
import pytest
from fastapi import HTTPException

from leave_ledger.utils.ids import generate_id, is_valid_id, ensure_valid_id


def test_generated_ids_are_valid_and_unique():
    ids = {generate_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(is_valid_id(i) for i in ids)


@pytest.mark.parametrize("value", [
    "0F8FAD5B-D9CB-469F-A165-70867728950E",
    "0f8fad5b-d9cb-469f-a165-70867728950e",
])
def test_canonical_uuid_accepted(value):
    assert is_valid_id(value)


@pytest.mark.parametrize("value", [
    None,
    "",
    "123",
    "not-a-uuid",
    "0f8fad5bd9cb469fa16570867728950e",
    "{0f8fad5b-d9cb-469f-a165-70867728950e}",
    12345,
])
def test_malformed_ids_rejected(value):
    assert not is_valid_id(value)


def test_ensure_valid_id_raises_400():
    with pytest.raises(HTTPException) as exc:
        ensure_valid_id("abc", "User")
    assert exc.value.status_code == 400
    assert "User" in exc.value.detail
