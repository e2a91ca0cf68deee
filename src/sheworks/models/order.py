# src/sheworks/models/order.py
"""Orders and their line items."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sheworks.db.ids import new_id
from sheworks.db.session import Base
from sheworks.db.time import utcnow

ORDER_STATUSES = (
    "pending",
    "confirmed",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
    "refunded",
)


class Order(Base):
    """A customer's purchase, possibly spanning several vendors."""

    __tablename__ = "customer_order"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    order_number: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    customer_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("customer.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")

    billing_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    shipping_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    payment: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    shipping: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    shipping_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # [{status, timestamp, note, updated_by_kind}], appended on every transition.
    status_history: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    items: Mapped[list[OrderItem]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def vendor_ids(self) -> list[str]:
        """Distinct vendors involved in this order, in first-seen item order."""
        seen: list[str] = []
        for item in self.items:
            if item.vendor_id not in seen:
                seen.append(item.vendor_id)
        return seen


class OrderItem(Base):
    """One product line within an order, attributed to its vendor."""

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[str | None] = mapped_column(
        String(32), ForeignKey("product.id", ondelete="SET NULL"), nullable=True
    )
    vendor_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    total: Mapped[float] = mapped_column(Float, nullable=False)

    order: Mapped[Order] = relationship("Order", back_populates="items")
