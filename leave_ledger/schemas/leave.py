"""
Leave schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer, ConfigDict
from leave_ledger.models.leave import LeaveStatus
from leave_ledger.utils.datetime_utils import iso_8601_utc


class LeavePayload(BaseModel):
    """
    Schema for requesting or editing leave.

    Dates accept ISO-8601 strings or epoch numbers (milliseconds since epoch
    for large values, seconds otherwise). Naive values are treated as UTC.
    """
    start_date: datetime = Field(..., description="Start of leave")
    end_date: datetime = Field(..., description="End of leave")


class LeaveStatusUpdate(BaseModel):
    """Schema for a status transition"""
    status: LeaveStatus = Field(..., description="Target status (APPROVED or REJECTED)")


class LeaveOut(BaseModel):
    """Schema for leave output. Datetimes in UTC (Z)."""
    id: str
    user_id: str
    start_date: datetime
    end_date: datetime
    days: int
    status: LeaveStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("start_date", "end_date", "created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)


class LeaveListResponse(BaseModel):
    """Schema for leave list response"""
    items: List[LeaveOut]
    total: int


class BalanceTransactionOut(BaseModel):
    """Single balance change for audit. Datetimes in UTC (Z)."""
    id: int
    user_id: str
    leave_id: Optional[str]
    delta_days: int
    balance_after: int
    action: str
    remarks: Optional[str]
    action_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("action_at", when_used="always")
    def _ser_action_at(self, dt: datetime) -> str:
        return iso_8601_utc(dt) or ""
