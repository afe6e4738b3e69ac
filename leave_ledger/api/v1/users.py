"""
User management endpoints, plus the per-user leave and balance views
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from leave_ledger.core.deps import get_db
from leave_ledger.schemas.user import UserCreate, UserUpdate, UserOut
from leave_ledger.schemas.leave import (
    LeavePayload,
    LeaveOut,
    LeaveListResponse,
    BalanceTransactionOut,
)
from leave_ledger.services.user_service import (
    get_user,
    list_users,
    create_user,
    update_user,
    delete_user,
)
from leave_ledger.services.leave_service import request_leave, list_user_leave_requests
from leave_ledger.services import balance_service
from leave_ledger.utils.ids import ensure_valid_id

router = APIRouter()


@router.get("", response_model=List[UserOut])
async def list_users_endpoint(db: Session = Depends(get_db)):
    """List all users"""
    return list_users(db)


@router.post("", response_model=UserOut, status_code=201)
async def create_user_endpoint(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Create a user

    available_days defaults to DEFAULT_AVAILABLE_DAYS when omitted.
    """
    return create_user(db, user_data)


@router.get("/{user_id}", response_model=UserOut)
async def get_user_endpoint(user_id: str, db: Session = Depends(get_db)):
    """Get a user by id"""
    return get_user(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
async def update_user_endpoint(user_id: str, user_data: UserUpdate, db: Session = Depends(get_db)):
    """Update name, email and optionally available_days"""
    return update_user(db, user_id, user_data)


@router.delete("/{user_id}", response_model=UserOut)
async def delete_user_endpoint(user_id: str, db: Session = Depends(get_db)):
    """Delete a user; their leave requests are kept"""
    return delete_user(db, user_id)


@router.get("/{user_id}/leaves", response_model=LeaveListResponse)
async def list_user_leaves_endpoint(user_id: str, db: Session = Depends(get_db)):
    """List leave requests owned by the user"""
    leave_requests = list_user_leave_requests(db, user_id)
    return LeaveListResponse(
        items=[LeaveOut.model_validate(req) for req in leave_requests],
        total=len(leave_requests)
    )


@router.post("/{user_id}/leaves", response_model=LeaveOut, status_code=201)
async def request_leave_endpoint(user_id: str, leave_data: LeavePayload, db: Session = Depends(get_db)):
    """
    Request leave for a user (creates a PENDING request)

    Validations:
    - start_date strictly before end_date
    - both dates in the current calendar year
    - enough available days
    - no overlap with the user's existing requests (inclusive boundaries)

    The requested days are debited immediately.
    """
    return request_leave(db, user_id, leave_data.start_date, leave_data.end_date)


@router.get("/{user_id}/transactions", response_model=List[BalanceTransactionOut])
async def list_user_transactions_endpoint(
    user_id: str,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Balance change history for the user, newest first"""
    ensure_valid_id(user_id, "User")
    return balance_service.list_transactions(db, user_id, limit=limit)
