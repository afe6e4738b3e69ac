"""
Leave endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from leave_ledger.core.deps import get_db
from leave_ledger.schemas.leave import (
    LeavePayload,
    LeaveStatusUpdate,
    LeaveOut,
    LeaveListResponse,
)
from leave_ledger.services.leave_service import (
    get_leave_request,
    list_leave_requests,
    list_leave_requests_by_status,
    update_leave,
    update_leave_status,
    delete_leave,
)

router = APIRouter()


def _list_response(leave_requests) -> LeaveListResponse:
    return LeaveListResponse(
        items=[LeaveOut.model_validate(req) for req in leave_requests],
        total=len(leave_requests)
    )


@router.get("", response_model=LeaveListResponse)
async def list_leaves_endpoint(db: Session = Depends(get_db)):
    """List all leave requests"""
    return _list_response(list_leave_requests(db))


@router.get("/status/{leave_status}", response_model=LeaveListResponse)
async def list_leaves_by_status_endpoint(leave_status: str, db: Session = Depends(get_db)):
    """List leave requests with the given status (PENDING, APPROVED or REJECTED)"""
    return _list_response(list_leave_requests_by_status(db, leave_status))


@router.get("/{leave_id}", response_model=LeaveOut)
async def get_leave_endpoint(leave_id: str, db: Session = Depends(get_db)):
    """Get a leave request by id"""
    return get_leave_request(db, leave_id)


@router.put("/{leave_id}", response_model=LeaveOut)
async def update_leave_endpoint(leave_id: str, leave_data: LeavePayload, db: Session = Depends(get_db)):
    """
    Change the period of a leave request

    The day count is recomputed and the difference is settled against the
    owner's balance while the request is PENDING or APPROVED.
    """
    return update_leave(db, leave_id, leave_data.start_date, leave_data.end_date)


@router.delete("/{leave_id}", response_model=LeaveOut)
async def delete_leave_endpoint(leave_id: str, db: Session = Depends(get_db)):
    """Delete a leave request; charged days are credited back"""
    return delete_leave(db, leave_id)


@router.patch("/{leave_id}/status", response_model=LeaveOut)
async def update_leave_status_endpoint(
    leave_id: str,
    status_data: LeaveStatusUpdate,
    db: Session = Depends(get_db)
):
    """
    Approve or reject a PENDING leave request

    - APPROVED: no balance change (days were taken on request)
    - REJECTED: days are credited back
    - Any other transition returns 409
    """
    return update_leave_status(db, leave_id, status_data.status)
