"""
API v1 router that aggregates all endpoint routers.
All routes require authentication except health and sign-in.
"""

from fastapi import APIRouter, Depends
from ordertracker.api.v1.middleware import require_authentication

from ordertracker.api.v1.endpoints import (
    health,
    auth,
    users,
    clients,
    orders,
    payments,
    dashboard,
)

api_router = APIRouter()

# Public routes (no authentication required)
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])

# Protected routes
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_authentication)],
)
api_router.include_router(
    clients.router,
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(require_authentication)],
)
api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["orders"],
    dependencies=[Depends(require_authentication)],
)
api_router.include_router(
    payments.router,
    prefix="/payments",
    tags=["payments"],
    dependencies=[Depends(require_authentication)],
)
api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_authentication)],
)
