"""API v1 routes."""

from fastapi import APIRouter

from purgehub.api.v1 import admin, auth, health, reports

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
