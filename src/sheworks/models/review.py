# src/sheworks/models/review.py
"""Customer reviews of catalog products."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from sheworks.db.session import Base
from sheworks.db.time import utcnow


class ProductReview(Base):
    """A 1-5 star rating with a comment; one per customer and product."""

    __tablename__ = "product_review"
    __table_args__ = (
        UniqueConstraint("product_id", "customer_id", name="uq_product_review_customer"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_product_review_rating"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("customer.id", ondelete="CASCADE"), nullable=False
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
