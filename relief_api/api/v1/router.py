"""
API v1 Router
Main router for all API v1 endpoints
"""

from fastapi import APIRouter
from relief_api.api.v1.endpoints import admin_management, audit_logs, session, system_settings

api_router = APIRouter()

# Caller identity endpoints
api_router.include_router(
    session.router,
    tags=["session"]
)

# Audit trail endpoints
api_router.include_router(
    audit_logs.router,
    prefix="/admin/audit-logs",
    tags=["audit-logs"]
)

# System administrator management endpoints
api_router.include_router(
    admin_management.router,
    prefix="/admin/system-administrators",
    tags=["system-administrators"]
)

# System settings endpoints
api_router.include_router(
    system_settings.router,
    prefix="/admin/system-settings",
    tags=["system-settings"]
)
