"""
Leave models
"""
from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    String,
    Text,
    Enum as SQLEnum,
    Index,
    CheckConstraint,
)
import enum
from leave_ledger.db.base import Base
from leave_ledger.utils.ids import generate_id


class LeaveStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# Allowed status edges; APPROVED and REJECTED are terminal
LEAVE_STATUS_TRANSITIONS = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}

# Statuses whose days are currently debited from the owner's balance
CHARGED_LEAVE_STATUSES = frozenset({LeaveStatus.PENDING, LeaveStatus.APPROVED})


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(String(36), primary_key=True, default=generate_id)
    # No FK: deleting a user leaves its requests in place
    user_id = Column(String(36), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    days = Column(Integer, nullable=False)
    status = Column(SQLEnum(LeaveStatus), nullable=False, default=LeaveStatus.PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_leave_requests_user_dates', 'user_id', 'start_date', 'end_date'),
        CheckConstraint('start_date < end_date', name='check_start_date_lt_end_date'),
        CheckConstraint('days >= 1', name='check_days_positive'),
    )


class BalanceTransactionAction(str, enum.Enum):
    REQUEST_DEBIT = "REQUEST_DEBIT"
    REJECT_CREDIT = "REJECT_CREDIT"
    EDIT_ADJUST = "EDIT_ADJUST"
    DELETE_CREDIT = "DELETE_CREDIT"
    MANUAL_ADJUST = "MANUAL_ADJUST"


class BalanceTransaction(Base):
    """Audit trail for available_days: one row per credit or debit."""
    __tablename__ = "balance_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    leave_id = Column(String(36), nullable=True, index=True)
    delta_days = Column(Integer, nullable=False)  # + for credit, - for debit
    balance_after = Column(Integer, nullable=False)
    action = Column(String(30), nullable=False)
    remarks = Column(Text, nullable=True)
    action_at = Column(DateTime(timezone=True), nullable=False)
