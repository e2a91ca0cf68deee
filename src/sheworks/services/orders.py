"""Order placement and status changes."""

from __future__ import annotations

import logging
import random
import string
import time
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from sheworks.core.settings import settings
from sheworks.db.time import utc_timestamp
from sheworks.models import Customer, Notification, Order, OrderItem, Product
from sheworks.schemas.order import OrderCreate

# Configure logger for this module
logger = logging.getLogger(__name__)

PAYMENT_METHOD_ALIASES = {"card": "credit_card", "cod": "cash_on_delivery"}
PAYMENT_STATUS_ALIASES = {"paid": "completed"}
SHIPPING_METHODS = ("standard", "express", "overnight", "pickup")


class ProductNotFoundError(LookupError):
    """Raised when an ordered product does not exist or is no longer listed."""


class InsufficientStockError(ValueError):
    """Raised when an ordered quantity exceeds the product's stock."""


def generate_order_number() -> str:
    """Return a human-friendly order number such as ``SHE-12345678-AB3Z``."""
    stamp = str(int(time.time() * 1000))[-8:]
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"SHE-{stamp}-{suffix}"


def _money(amount: float) -> float:
    return round(amount, 2)


def place_order(db: Session, customer: Customer, payload: OrderCreate) -> Order:
    """Validate stock, price the basket and persist a pending order.

    Stock is decremented and the sales count raised for every line. Nothing
    is committed unless every product exists and has enough stock.

    Raises:
        ProductNotFoundError: If a product id is unknown or inactive.
        InsufficientStockError: If a product has fewer units than requested.
    """
    requested: dict[str, int] = {}
    for line in payload.items:
        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

    products: dict[str, Product] = {}
    for product_id, quantity in requested.items():
        product = db.get(Product, product_id)
        if product is None or not product.is_active:
            raise ProductNotFoundError(f"Product {product_id} not found")
        if product.stock < quantity:
            raise InsufficientStockError(f"Insufficient stock for {product.name}")
        products[product_id] = product

    items: list[OrderItem] = []
    subtotal = 0.0
    for line in payload.items:
        product = products[line.product_id]
        product.stock -= line.quantity
        product.sales_count += line.quantity
        line_total = _money(product.price * line.quantity)
        subtotal += line_total
        items.append(
            OrderItem(
                product_id=product.id,
                vendor_id=product.vendor_id,
                name=product.name,
                quantity=line.quantity,
                price=product.price,
                total=line_total,
            )
        )

    subtotal = _money(subtotal)
    tax = _money(subtotal * settings.tax_rate)
    shipping_cost = payload.shipping.cost
    discount = payload.payment.discount
    total = _money(subtotal + tax + shipping_cost - discount)

    payment: dict[str, Any] = payload.payment.model_dump(by_alias=True, exclude_none=True)
    payment["method"] = PAYMENT_METHOD_ALIASES.get(payload.payment.method, payload.payment.method)
    payment_status = payload.payment.status or "pending"
    payment["status"] = PAYMENT_STATUS_ALIASES.get(payment_status, payment_status)
    payment["amount"] = total

    shipping_method = payload.shipping.method
    if shipping_method not in SHIPPING_METHODS:
        shipping_method = "standard"

    order = Order(
        order_number=generate_order_number(),
        customer_id=customer.id,
        status="pending",
        billing_address=payload.billing_address.model_dump(by_alias=True),
        shipping_address=payload.shipping_address.model_dump(by_alias=True),
        payment=payment,
        shipping={"method": shipping_method, "cost": shipping_cost},
        subtotal=subtotal,
        tax=tax,
        shipping_cost=shipping_cost,
        discount=discount,
        total=total,
        status_history=[{"status": "pending", "timestamp": utc_timestamp()}],
        items=items,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order %s placed by customer %s", order.order_number, customer.id)
    return order


def orders_for_customer(db: Session, customer_id: str) -> list[Order]:
    return list(
        db.scalars(
            select(Order).where(Order.customer_id == customer_id).order_by(Order.created_at.desc())
        )
    )


def orders_for_vendor(db: Session, vendor_id: str) -> list[Order]:
    """Return orders containing at least one line sold by ``vendor_id``."""
    involved = select(OrderItem.order_id).where(OrderItem.vendor_id == vendor_id)
    return list(
        db.scalars(select(Order).where(Order.id.in_(involved)).order_by(Order.created_at.desc()))
    )


def update_status(
    db: Session,
    order: Order,
    new_status: str,
    updated_by_kind: str,
    note: str | None = None,
) -> Order:
    """Move ``order`` to ``new_status`` and tell the customer about it."""
    order.status = new_status
    entry: dict[str, Any] = {
        "status": new_status,
        "timestamp": utc_timestamp(),
        "updatedByKind": updated_by_kind,
    }
    if note:
        entry["note"] = note
    # Reassign so the JSON column is flagged dirty.
    order.status_history = [*order.status_history, entry]

    if order.customer_id:
        db.add(
            Notification(
                owner_id=order.customer_id,
                owner_kind="customer",
                kind="order_status",
                text=f"Your order {order.order_number} is now {new_status}",
                payload={"orderId": order.id, "status": new_status},
            )
        )
    db.commit()
    db.refresh(order)
    return order
