"""
Balance service - credits and debits against a user's available_days.

- Every adjustment writes a BalanceTransaction row (signed delta, balance after).
- No floor is enforced here; callers check sufficiency before debiting.
- Nothing is committed here: the caller commits the adjustment together with
  the leave request change that caused it.
"""
import enum
from typing import List, Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from leave_ledger.core.logging import get_logger
from leave_ledger.models.user import User
from leave_ledger.models.leave import BalanceTransaction, BalanceTransactionAction
from leave_ledger.utils.datetime_utils import now_utc

logger = get_logger(__name__)


class BalanceDirection(str, enum.Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


def record_transaction(
    db: Session,
    user_id: str,
    leave_id: Optional[str],
    delta_days: int,
    balance_after: int,
    action: BalanceTransactionAction,
    remarks: Optional[str],
) -> BalanceTransaction:
    t = BalanceTransaction(
        user_id=user_id,
        leave_id=leave_id,
        delta_days=delta_days,
        balance_after=balance_after,
        action=action.value,
        remarks=remarks,
        action_at=now_utc(),
    )
    db.add(t)
    return t


def adjust_available_days(
    db: Session,
    user_id: str,
    days: int,
    direction: BalanceDirection,
    action: BalanceTransactionAction,
    leave_id: Optional[str] = None,
    remarks: Optional[str] = None,
) -> User:
    """
    Apply a credit or debit of days to the user's balance.

    Args:
        db: Database session
        user_id: Owner of the balance
        days: Number of days (non-negative)
        direction: CREDIT adds days, DEBIT subtracts them
        action: Ledger action recorded on the transaction row
        leave_id: Leave request that caused the change, if any
        remarks: Free-text note for the transaction row

    Returns:
        The updated (uncommitted) User

    Raises:
        HTTPException: 409 if the user no longer exists
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.error(
            "balance adjustment failed: user_id=%s missing days=%s direction=%s leave_id=%s",
            user_id, days, direction.value, leave_id,
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Could not update available days: user with id {user_id} no longer exists"
        )

    delta = days if direction == BalanceDirection.CREDIT else -days
    before = user.available_days
    user.available_days = before + delta
    user.updated_at = now_utc()
    record_transaction(db, user_id, leave_id, delta, user.available_days, action, remarks)

    logger.info(
        "balance adjusted: user_id=%s action=%s delta=%s before=%s after=%s leave_id=%s",
        user_id, action.value, delta, before, user.available_days, leave_id,
    )
    return user


def list_transactions(
    db: Session,
    user_id: str,
    limit: int = 100,
) -> List[BalanceTransaction]:
    """Most recent balance changes for a user, newest first."""
    return (
        db.query(BalanceTransaction)
        .filter(BalanceTransaction.user_id == user_id)
        .order_by(BalanceTransaction.action_at.desc(), BalanceTransaction.id.desc())
        .limit(limit)
        .all()
    )
