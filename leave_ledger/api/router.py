"""
Main API router
"""
from fastapi import APIRouter

from leave_ledger.api.v1 import (
    health,
    version,
    users,
    leaves,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
