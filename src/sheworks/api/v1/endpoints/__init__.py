# src/sheworks/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .orders import router as orders_router
from .products import router as products_router
from .realtime import router as realtime_router

__all__ = [
    "admin_router",
    "auth_router",
    "messages_router",
    "notifications_router",
    "orders_router",
    "products_router",
    "realtime_router",
]
