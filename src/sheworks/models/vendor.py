# src/sheworks/models/vendor.py
"""Vendor (seller) accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from sheworks.db.ids import new_id
from sheworks.db.session import Base
from sheworks.db.time import utcnow

VENDOR_STATUS_PENDING = "pending"
VENDOR_STATUS_ACTIVE = "active"
VENDOR_STATUS_SUSPENDED = "suspended"
VENDOR_STATUS_INACTIVE = "inactive"

VENDOR_CATEGORIES = ("jewelry", "accessories", "fashion", "watches", "bags", "other")


class Vendor(Base):
    """A seller with a storefront; messages customers and fulfils order items."""

    __tablename__ = "vendor"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    business_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="jewelry")
    preferred_language: Mapped[str] = mapped_column(String(5), nullable=False, default="en")
    # pending -> active (admin approval) -> suspended/inactive
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=VENDOR_STATUS_PENDING)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    kind = "vendor"

    @property
    def display_name(self) -> str:
        """Return the storefront name."""
        return self.business_name

    @property
    def is_active(self) -> bool:
        """Return True when the vendor may sell and log in."""
        return self.status == VENDOR_STATUS_ACTIVE
