"""API routes."""

from fastapi import APIRouter, Depends

from omnimall.deps import require_admin
from omnimall.routes import admin, notifications, orders, ui, verification

api_router = APIRouter()

# UI endpoints (home page)
api_router.include_router(ui.router, prefix="/v1/ui", tags=["ui"])

# Order fulfillment
api_router.include_router(orders.router, prefix="/v1/orders", tags=["orders"])

# Seller verification
api_router.include_router(verification.router, prefix="/v1/verification", tags=["verification"])

# Live notifications (public read)
api_router.include_router(notifications.router, prefix="/v1/notifications", tags=["notifications"])

# Admin endpoints (merchandising, notifications)
api_router.include_router(
    admin.router,
    prefix="/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)
