"""
Database models
"""
from leave_ledger.models.user import User
from leave_ledger.models.leave import (
    LeaveRequest,
    LeaveStatus,
    BalanceTransaction,
    BalanceTransactionAction,
    LEAVE_STATUS_TRANSITIONS,
    CHARGED_LEAVE_STATUSES,
)

__all__ = [
    "User",
    "LeaveRequest",
    "LeaveStatus",
    "BalanceTransaction",
    "BalanceTransactionAction",
    "LEAVE_STATUS_TRANSITIONS",
    "CHARGED_LEAVE_STATUSES",
]
