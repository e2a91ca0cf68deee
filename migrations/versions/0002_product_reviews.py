"""product reviews, rating summary and sales count

Revision ID: 0002_product_reviews
Revises: 0001_initial
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002_product_reviews"
down_revision: Union[str, Sequence[str], None] = "0001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the review table and the denormalised product counters."""
    with op.batch_alter_table("product") as batch_op:
        batch_op.add_column(
            sa.Column("rating_average", sa.Float(), nullable=False, server_default="0")
        )
        batch_op.add_column(
            sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0")
        )
        batch_op.add_column(
            sa.Column("sales_count", sa.Integer(), nullable=False, server_default="0")
        )

    op.create_table(
        "product_review",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.String(length=32), nullable=False),
        sa.Column("customer_id", sa.String(length=32), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_product_review_rating"),
        sa.ForeignKeyConstraint(["product_id"], ["product.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["customer_id"], ["customer.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("product_id", "customer_id", name="uq_product_review_customer"),
    )
    op.create_index("ix_product_review_product_id", "product_review", ["product_id"])

    # Existing orders already count towards best-seller ranking.
    op.execute(
        "UPDATE product SET sales_count = COALESCE("
        "(SELECT SUM(order_item.quantity) FROM order_item "
        "WHERE order_item.product_id = product.id), 0)"
    )


def downgrade() -> None:
    """Drop the review table and the product counters."""
    op.drop_index("ix_product_review_product_id", table_name="product_review")
    op.drop_table("product_review")
    with op.batch_alter_table("product") as batch_op:
        batch_op.drop_column("sales_count")
        batch_op.drop_column("rating_count")
        batch_op.drop_column("rating_average")
