"""
Tests for the balance adjuster
"""
import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from leave_ledger.models.leave import BalanceTransaction, BalanceTransactionAction
from leave_ledger.services.balance_service import (
    BalanceDirection,
    adjust_available_days,
    list_transactions,
)

MISSING_ID = "3b241101-e2bb-4255-8caf-4136c566a962"


def test_debit_and_credit(db: Session, test_user):
    adjust_available_days(
        db, test_user.id, 4, BalanceDirection.DEBIT, BalanceTransactionAction.REQUEST_DEBIT
    )
    user = adjust_available_days(
        db, test_user.id, 1, BalanceDirection.CREDIT, BalanceTransactionAction.REJECT_CREDIT
    )
    db.commit()

    assert user.available_days == 18
    assert user.updated_at is not None


def test_debit_has_no_floor(db: Session, test_user):
    user = adjust_available_days(
        db, test_user.id, 30, BalanceDirection.DEBIT, BalanceTransactionAction.MANUAL_ADJUST
    )
    assert user.available_days == -9


def test_adjustment_is_not_committed(db: Session, test_user):
    adjust_available_days(
        db, test_user.id, 5, BalanceDirection.DEBIT, BalanceTransactionAction.REQUEST_DEBIT
    )
    db.rollback()

    db.refresh(test_user)
    assert test_user.available_days == 21
    assert db.query(BalanceTransaction).count() == 0


def test_missing_user_fails_without_writing(db: Session):
    with pytest.raises(HTTPException) as exc:
        adjust_available_days(
            db, MISSING_ID, 5, BalanceDirection.CREDIT, BalanceTransactionAction.REJECT_CREDIT
        )

    assert exc.value.status_code == 409
    assert db.query(BalanceTransaction).count() == 0


def test_transactions_newest_first(db: Session, test_user):
    adjust_available_days(
        db, test_user.id, 2, BalanceDirection.DEBIT, BalanceTransactionAction.REQUEST_DEBIT,
        leave_id="7d444840-9dc0-11d1-b245-5ffdce74fad2",
    )
    db.commit()
    adjust_available_days(
        db, test_user.id, 2, BalanceDirection.CREDIT, BalanceTransactionAction.REJECT_CREDIT,
        leave_id="7d444840-9dc0-11d1-b245-5ffdce74fad2", remarks="rejected",
    )
    db.commit()

    rows = list_transactions(db, test_user.id)

    assert [(r.action, r.delta_days, r.balance_after) for r in rows] == [
        ("REJECT_CREDIT", 2, 21),
        ("REQUEST_DEBIT", -2, 19),
    ]
    assert rows[0].remarks == "rejected"
    assert list_transactions(db, test_user.id, limit=1)[0].action == "REJECT_CREDIT"


def test_transactions_endpoint(client, test_user):
    assert client.get(f"/api/v1/users/{test_user.id}/transactions").json() == []
    assert client.get("/api/v1/users/bad/transactions").status_code == 400
