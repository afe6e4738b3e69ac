"""
Tests for leave status transitions and their balance effects
"""
import pytest
from fastapi import status
from sqlalchemy.orm import Session

from leave_ledger.models.user import User
from leave_ledger.models.leave import BalanceTransaction

MISSING_ID = "3b241101-e2bb-4255-8caf-4136c566a962"


def balance_of(db: Session, user_id: str) -> int:
    db.expire_all()
    return db.query(User).filter(User.id == user_id).one().available_days


@pytest.fixture
def pending_leave(client, test_user, day):
    response = client.post(
        f"/api/v1/users/{test_user.id}/leaves",
        json={"start_date": day(10).isoformat(), "end_date": day(15).isoformat()},
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def set_status(client, leave_id, new_status):
    return client.patch(f"/api/v1/leaves/{leave_id}/status", json={"status": new_status})


def test_reject_restores_balance(client, db, test_user, pending_leave):
    assert balance_of(db, test_user.id) == 16

    response = set_status(client, pending_leave["id"], "REJECTED")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "REJECTED"
    assert data["updated_at"] is not None
    assert balance_of(db, test_user.id) == 21


def test_approve_keeps_charge(client, db, test_user, pending_leave):
    response = set_status(client, pending_leave["id"], "APPROVED")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "APPROVED"
    assert balance_of(db, test_user.id) == 16


def test_repeated_approve_does_not_double_debit(client, db, test_user, pending_leave):
    set_status(client, pending_leave["id"], "APPROVED")

    response = set_status(client, pending_leave["id"], "APPROVED")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert "APPROVED to APPROVED" in response.json()["detail"]
    assert balance_of(db, test_user.id) == 16


def test_repeated_reject_does_not_double_credit(client, db, test_user, pending_leave):
    set_status(client, pending_leave["id"], "REJECTED")

    response = set_status(client, pending_leave["id"], "REJECTED")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert balance_of(db, test_user.id) == 21


@pytest.mark.parametrize("first, second", [
    ("APPROVED", "REJECTED"),
    ("APPROVED", "PENDING"),
    ("REJECTED", "APPROVED"),
    ("REJECTED", "PENDING"),
])
def test_terminal_statuses_are_final(client, db, test_user, pending_leave, first, second):
    set_status(client, pending_leave["id"], first)
    before = balance_of(db, test_user.id)

    response = set_status(client, pending_leave["id"], second)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert balance_of(db, test_user.id) == before
    assert client.get(f"/api/v1/leaves/{pending_leave['id']}").json()["status"] == first


def test_pending_to_pending_refused(client, db, test_user, pending_leave):
    response = set_status(client, pending_leave["id"], "PENDING")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert balance_of(db, test_user.id) == 16


def test_invalid_status_value(client, pending_leave):
    response = set_status(client, pending_leave["id"], "CANCELLED")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_status_update_unknown_and_malformed_leave(client):
    assert set_status(client, MISSING_ID, "APPROVED").status_code == status.HTTP_404_NOT_FOUND
    assert set_status(client, "bad", "APPROVED").status_code == status.HTTP_400_BAD_REQUEST


def test_reject_after_owner_deleted_is_refused(client, db, test_user, pending_leave):
    client.delete(f"/api/v1/users/{pending_leave['user_id']}")

    response = set_status(client, pending_leave["id"], "REJECTED")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert "no longer exists" in response.json()["detail"]
    assert client.get(f"/api/v1/leaves/{pending_leave['id']}").json()["status"] == "PENDING"


def test_reject_records_credit_transaction(client, db, pending_leave):
    set_status(client, pending_leave["id"], "REJECTED")

    actions = [
        (t.action, t.delta_days, t.balance_after)
        for t in db.query(BalanceTransaction).order_by(BalanceTransaction.id).all()
    ]
    assert actions == [("REQUEST_DEBIT", -5, 16), ("REJECT_CREDIT", 5, 21)]


def test_list_by_status(client, test_user, day, pending_leave):
    second = client.post(
        f"/api/v1/users/{test_user.id}/leaves",
        json={"start_date": day(20).isoformat(), "end_date": day(22).isoformat()},
    ).json()
    set_status(client, second["id"], "APPROVED")

    pending = client.get("/api/v1/leaves/status/PENDING").json()
    approved = client.get("/api/v1/leaves/status/APPROVED").json()
    rejected = client.get("/api/v1/leaves/status/REJECTED").json()

    assert [item["id"] for item in pending["items"]] == [pending_leave["id"]]
    assert [item["id"] for item in approved["items"]] == [second["id"]]
    assert rejected == {"items": [], "total": 0}


def test_list_by_invalid_status(client):
    response = client.get("/api/v1/leaves/status/CANCELLED")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Please enter a valid status (PENDING, APPROVED, REJECTED)"
