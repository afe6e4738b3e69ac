"""
User schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, field_serializer, ConfigDict
from leave_ledger.utils.datetime_utils import iso_8601_utc


class UserPayload(BaseModel):
    """Fields shared by user creation and update"""
    name: str = Field(..., description="User name")
    email: str = Field(..., description="User email (unique)")
    available_days: Optional[int] = Field(
        None,
        ge=0,
        description="Available leave days; defaults to DEFAULT_AVAILABLE_DAYS on creation"
    )

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_required(cls, v, info):
        """Trim whitespace and reject blank values"""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError(f"{info.field_name} cannot be empty")
        return v


class UserCreate(UserPayload):
    """Schema for creating a user"""


class UserUpdate(UserPayload):
    """Schema for updating a user (name and email are always required)"""


class UserOut(BaseModel):
    """Schema for user output. Datetimes in UTC (Z)."""
    id: str
    name: str
    email: str
    available_days: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)
