"""
Version and metadata endpoint
"""
from fastapi import APIRouter
from leave_ledger.core.config import settings
from leave_ledger.core.constants import SERVICE_NAME, DEFAULT_VERSION

router = APIRouter()


@router.get("/version")
async def get_version():
    """
    Get application version and metadata

    Returns:
        Service name, version and environment
    """
    return {
        "service": SERVICE_NAME,
        "version": settings.VERSION or DEFAULT_VERSION,
        "env": settings.APP_ENV,
    }
