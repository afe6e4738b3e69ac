"""
Leave service - leave request lifecycle and the balance rules tied to it
"""
import logging
import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from leave_ledger.models.leave import (
    LeaveRequest,
    LeaveStatus,
    BalanceTransactionAction,
    LEAVE_STATUS_TRANSITIONS,
    CHARGED_LEAVE_STATUSES,
)
from leave_ledger.models.user import User
from leave_ledger.services import balance_service as balance
from leave_ledger.services.balance_service import BalanceDirection
from leave_ledger.services.user_service import get_user
from leave_ledger.utils.datetime_utils import ensure_utc, now_utc
from leave_ledger.utils.enums import enum_to_str, parse_enum
from leave_ledger.utils.ids import ensure_valid_id, generate_id

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def calculate_days(start_date: datetime, end_date: datetime) -> int:
    """
    Whole-day length of a leave period.

    The absolute difference is rounded to the nearest day (halves round up)
    and floored at 1, so equal instants still charge one day.

    Args:
        start_date: Start instant
        end_date: End instant

    Returns:
        Number of leave days (>= 1)
    """
    seconds = abs((ensure_utc(end_date) - ensure_utc(start_date)).total_seconds())
    days = math.floor(seconds / SECONDS_PER_DAY + 0.5)
    return max(1, days)


def validate_date_order(start_date: datetime, end_date: datetime) -> None:
    """
    Raises:
        HTTPException: If start_date is not strictly before end_date
    """
    if start_date >= end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date must be before end date"
        )


def validate_leave_year(start_date: datetime, end_date: datetime) -> None:
    """
    Validate that both dates fall within the current calendar year.

    Rejects requests in another year and requests crossing a year boundary.

    Raises:
        HTTPException: If either date is outside the current year
    """
    current_year = now_utc().year
    if start_date.year != current_year or end_date.year != current_year:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Leave period should be in the current calendar year ({current_year})"
        )


def validate_available_days(user: User, days: int) -> None:
    """
    Raises:
        HTTPException: If the user has fewer available days than requested
    """
    if user.available_days < days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"You are exceeding your available days for leave "
                f"(requested {days}, available {user.available_days})"
            )
        )


def validate_overlap(
    db: Session,
    user_id: str,
    start_date: datetime,
    end_date: datetime,
    exclude_leave_id: Optional[str] = None
) -> None:
    """
    Validate that the period doesn't overlap any existing request of the user.

    Boundaries are inclusive: a request ending exactly when the new one
    starts counts as overlapping.

    Raises:
        HTTPException: If overlap detected (409 Conflict)
    """
    # Overlap unless existing.end_date < new.start_date or existing.start_date > new.end_date
    query = db.query(LeaveRequest).filter(
        LeaveRequest.user_id == user_id,
        LeaveRequest.end_date >= start_date,
        LeaveRequest.start_date <= end_date
    )
    if exclude_leave_id:
        query = query.filter(LeaveRequest.id != exclude_leave_id)

    overlapping = query.first()
    if overlapping:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"The chosen leave period overlaps with an existing leave (id {overlapping.id})"
        )


def get_leave_request(db: Session, leave_id: str) -> LeaveRequest:
    """
    Raises:
        HTTPException: 400 if the id is malformed, 404 if no such leave request
    """
    ensure_valid_id(leave_id, "Leave")
    leave = db.query(LeaveRequest).filter(LeaveRequest.id == leave_id).first()
    if not leave:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Leave request with id {leave_id} not found"
        )
    return leave


def _ordered(query):
    return query.order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc())


def list_leave_requests(db: Session) -> List[LeaveRequest]:
    """All leave requests, oldest first"""
    return _ordered(db.query(LeaveRequest)).all()


def list_user_leave_requests(db: Session, user_id: str) -> List[LeaveRequest]:
    """Leave requests whose owner is user_id. The owner need not still exist."""
    ensure_valid_id(user_id, "User")
    return _ordered(db.query(LeaveRequest).filter(LeaveRequest.user_id == user_id)).all()


def list_leave_requests_by_status(db: Session, status_value: str) -> List[LeaveRequest]:
    """
    Raises:
        HTTPException: If status_value is not a LeaveStatus
    """
    leave_status = parse_enum(LeaveStatus, status_value)
    if leave_status is None:
        allowed = ", ".join(s.value for s in LeaveStatus)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please enter a valid status ({allowed})"
        )
    return _ordered(db.query(LeaveRequest).filter(LeaveRequest.status == leave_status)).all()


def request_leave(
    db: Session,
    user_id: str,
    start_date: datetime,
    end_date: datetime
) -> LeaveRequest:
    """
    Create a PENDING leave request and debit its days from the owner.

    Validation order (first failure wins):
    1. User id well-formed and the user exists
    2. start_date < end_date
    3. Both dates in the current calendar year
    4. At least one day
    5. Enough available days
    6. No overlap with the user's existing requests

    The request and the debit are committed together.

    Returns:
        Created LeaveRequest instance

    Raises:
        HTTPException: If validation fails
    """
    user = get_user(db, user_id)

    start_date = ensure_utc(start_date)
    end_date = ensure_utc(end_date)

    validate_date_order(start_date, end_date)
    validate_leave_year(start_date, end_date)

    days = calculate_days(start_date, end_date)
    if days < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Leave should be at least one day"
        )

    validate_available_days(user, days)
    validate_overlap(db, user.id, start_date, end_date)

    leave = LeaveRequest(
        id=generate_id(),
        user_id=user.id,
        start_date=start_date,
        end_date=end_date,
        days=days,
        status=LeaveStatus.PENDING,
        created_at=now_utc(),
        updated_at=None,
    )
    db.add(leave)

    try:
        balance.adjust_available_days(
            db, user.id, days, BalanceDirection.DEBIT,
            BalanceTransactionAction.REQUEST_DEBIT, leave_id=leave.id,
        )
    except HTTPException:
        db.rollback()
        raise

    db.commit()
    db.refresh(leave)

    logger.info(
        "leave requested: leave_id=%s user_id=%s days=%s status=%s",
        leave.id, leave.user_id, leave.days, enum_to_str(leave.status),
    )
    return leave


def update_leave(
    db: Session,
    leave_id: str,
    start_date: datetime,
    end_date: datetime
) -> LeaveRequest:
    """
    Change the period of a leave request and re-settle its charge.

    Overlap and leave-year checks are not re-run. If the request is
    currently charged (PENDING or APPROVED) the difference between the new
    and old day count is debited or credited; growing beyond the owner's
    available days is refused.

    Raises:
        HTTPException: If the id is bad, the dates are out of order, the
            balance is insufficient or the owner no longer exists
    """
    leave = get_leave_request(db, leave_id)

    start_date = ensure_utc(start_date)
    end_date = ensure_utc(end_date)
    validate_date_order(start_date, end_date)

    new_days = calculate_days(start_date, end_date)
    if new_days < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Leave should be at least one day"
        )

    old_days = leave.days
    delta = new_days - old_days

    try:
        if leave.status in CHARGED_LEAVE_STATUSES and delta != 0:
            if delta > 0:
                owner = db.query(User).filter(User.id == leave.user_id).first()
                if owner is not None:
                    validate_available_days(owner, delta)
            balance.adjust_available_days(
                db, leave.user_id, abs(delta),
                BalanceDirection.DEBIT if delta > 0 else BalanceDirection.CREDIT,
                BalanceTransactionAction.EDIT_ADJUST, leave_id=leave.id,
                remarks=f"days {old_days} -> {new_days}",
            )
    except HTTPException:
        db.rollback()
        raise

    leave.start_date = start_date
    leave.end_date = end_date
    leave.days = new_days
    leave.updated_at = now_utc()
    db.commit()
    db.refresh(leave)

    logger.info(
        "leave updated: leave_id=%s old_days=%s new_days=%s status=%s",
        leave.id, old_days, new_days, enum_to_str(leave.status),
    )
    return leave


def update_leave_status(db: Session, leave_id: str, new_status: LeaveStatus) -> LeaveRequest:
    """
    Move a leave request along PENDING -> APPROVED or PENDING -> REJECTED.

    Days were debited when the request was created, so approval changes no
    balance and rejection credits the days back. Any other transition,
    including repeating the current status, is refused.

    Raises:
        HTTPException: 409 for a disallowed transition or a vanished owner
    """
    leave = get_leave_request(db, leave_id)

    before_status = leave.status
    if new_status not in LEAVE_STATUS_TRANSITIONS[before_status]:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change leave status from {before_status.value} to {enum_to_str(new_status)}"
        )

    try:
        if new_status == LeaveStatus.REJECTED:
            balance.adjust_available_days(
                db, leave.user_id, leave.days, BalanceDirection.CREDIT,
                BalanceTransactionAction.REJECT_CREDIT, leave_id=leave.id,
            )
    except HTTPException:
        db.rollback()
        raise

    leave.status = new_status
    leave.updated_at = now_utc()
    db.commit()
    db.refresh(leave)

    logger.info(
        "leave status transition: leave_id=%s before=%s after=%s",
        leave.id, before_status.value, new_status.value,
    )
    return leave


def delete_leave(db: Session, leave_id: str) -> LeaveRequest:
    """
    Delete a leave request, crediting its days back if they are still charged.

    If the owner no longer exists there is no balance to restore and the
    request is deleted without a credit.
    """
    leave = get_leave_request(db, leave_id)

    if leave.status in CHARGED_LEAVE_STATUSES:
        owner_exists = db.query(User.id).filter(User.id == leave.user_id).first() is not None
        if owner_exists:
            balance.adjust_available_days(
                db, leave.user_id, leave.days, BalanceDirection.CREDIT,
                BalanceTransactionAction.DELETE_CREDIT, leave_id=leave.id,
            )
        else:
            logger.warning(
                "leave deleted without credit: leave_id=%s user_id=%s missing days=%s",
                leave.id, leave.user_id, leave.days,
            )

    db.delete(leave)
    db.commit()

    logger.info("leave deleted: leave_id=%s status=%s", leave.id, enum_to_str(leave.status))
    return leave
