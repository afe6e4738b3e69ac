"""
User service - business logic for user management
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from leave_ledger.core.config import settings
from leave_ledger.models.user import User
from leave_ledger.models.leave import BalanceTransactionAction
from leave_ledger.schemas.user import UserCreate, UserUpdate
from leave_ledger.services.balance_service import record_transaction
from leave_ledger.utils.datetime_utils import now_utc
from leave_ledger.utils.ids import ensure_valid_id, generate_id

logger = logging.getLogger(__name__)


def _check_email_unique(db: Session, email: str, exclude_user_id: Optional[str] = None) -> None:
    query = db.query(User).filter(User.email == email)
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )


def get_user(db: Session, user_id: str) -> User:
    """
    Get a user by id

    Raises:
        HTTPException: 400 if the id is malformed, 404 if no such user
    """
    ensure_valid_id(user_id, "User")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with id {user_id} not found"
        )
    return user


def list_users(db: Session) -> List[User]:
    """All users, oldest first"""
    return db.query(User).order_by(User.created_at.asc(), User.id.asc()).all()


def create_user(db: Session, user_data: UserCreate) -> User:
    """
    Create a new user

    Args:
        db: Database session
        user_data: Name, email and optional available_days

    Returns:
        Created User instance

    Raises:
        HTTPException: If the email is already taken
    """
    _check_email_unique(db, user_data.email)

    available_days = user_data.available_days
    if available_days is None:
        available_days = settings.DEFAULT_AVAILABLE_DAYS

    user = User(
        id=generate_id(),
        name=user_data.name,
        email=user_data.email,
        available_days=available_days,
        created_at=now_utc(),
        updated_at=None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("user created: user_id=%s available_days=%s", user.id, user.available_days)
    return user


def update_user(db: Session, user_id: str, user_data: UserUpdate) -> User:
    """
    Replace a user's name and email, and optionally overwrite available_days.

    A change to available_days is recorded as a MANUAL_ADJUST transaction.

    Raises:
        HTTPException: 400 for a malformed id or duplicate email, 404 if no such user
    """
    user = get_user(db, user_id)
    _check_email_unique(db, user_data.email, exclude_user_id=user.id)

    user.name = user_data.name
    user.email = user_data.email

    new_days = user_data.available_days
    if new_days is not None and new_days != user.available_days:
        delta = new_days - user.available_days
        user.available_days = new_days
        record_transaction(
            db, user.id, None, delta, new_days,
            BalanceTransactionAction.MANUAL_ADJUST, "available_days set via user update",
        )
        logger.info("user balance overwritten: user_id=%s delta=%s after=%s", user.id, delta, new_days)

    user.updated_at = now_utc()
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> User:
    """
    Delete a user and return the removed record.

    Leave requests owned by the user are left in place and their balance
    effects are not retracted.
    """
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("user deleted: user_id=%s", user_id)
    return user
