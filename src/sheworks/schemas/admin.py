# src/sheworks/schemas/admin.py
"""Admin panel schemas."""

from __future__ import annotations

from datetime import datetime

from .common import CamelModel


class AdminCustomer(CamelModel):
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime


class AdminVendor(CamelModel):
    id: str
    business_name: str
    email: str
    category: str
    status: str
    is_verified: bool
    created_at: datetime


class AdminCustomerList(CamelModel):
    customers: list[AdminCustomer]


class AdminVendorList(CamelModel):
    vendors: list[AdminVendor]


class DashboardStats(CamelModel):
    """Headline counts for the admin dashboard."""

    customers: int
    vendors: int
    active_vendors: int
    pending_vendors: int
    products: int
    orders: int
    revenue: float
