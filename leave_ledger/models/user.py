"""
User model
"""
from sqlalchemy import Column, Integer, String, DateTime
from leave_ledger.db.base import Base
from leave_ledger.utils.ids import generate_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    available_days = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)  # None until first update
