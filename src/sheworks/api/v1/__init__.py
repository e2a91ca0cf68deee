# src/sheworks/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    messages_router,
    notifications_router,
    orders_router,
    products_router,
    realtime_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "messages_router",
    "notifications_router",
    "orders_router",
    "products_router",
    "realtime_router",
]
