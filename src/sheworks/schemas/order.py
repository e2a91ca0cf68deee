# src/sheworks/schemas/order.py
"""Order and payment schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from sheworks.models.order import ORDER_STATUSES

from .common import CamelModel

OrderStatus = Literal[ORDER_STATUSES]  # type: ignore[valid-type]


class Address(CamelModel):
    """Billing or shipping address; every field is required."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class PaymentInfo(CamelModel):
    """Payment details supplied at checkout."""

    method: str = Field(..., min_length=1)
    status: str | None = None
    transaction_id: str | None = None
    discount: float = Field(default=0.0, ge=0)


class ShippingInfo(CamelModel):
    """Shipping choice supplied at checkout."""

    method: str | None = None
    cost: float = Field(default=0.0, ge=0)


class OrderItemCreate(CamelModel):
    """One requested product line."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class OrderCreate(CamelModel):
    """Body of ``POST /orders``."""

    items: list[OrderItemCreate] = Field(..., min_length=1)
    billing_address: Address
    shipping_address: Address
    payment: PaymentInfo
    shipping: ShippingInfo


class OrderItemResponse(CamelModel):
    """A stored order line."""

    id: int
    product_id: str | None = None
    vendor_id: str
    name: str
    quantity: int
    price: float
    total: float


class OrderResponse(CamelModel):
    """A stored order."""

    id: str
    order_number: str
    customer_id: str | None = None
    status: str
    items: list[OrderItemResponse]
    billing_address: dict[str, Any]
    shipping_address: dict[str, Any]
    payment: dict[str, Any]
    shipping: dict[str, Any]
    subtotal: float
    tax: float
    shipping_cost: float
    discount: float
    total: float
    status_history: list[dict[str, Any]]
    created_at: datetime


class OrderEnvelope(CamelModel):
    """Wrapper for a single order."""

    order: OrderResponse


class OrderList(CamelModel):
    """A list of orders, newest first."""

    orders: list[OrderResponse]


class OrderStatusUpdate(CamelModel):
    """Body of ``PUT /orders/{id}/status``."""

    status: OrderStatus
    note: str | None = Field(default=None, max_length=500)


class PaymentIntentRequest(CamelModel):
    """Body of ``POST /orders/create-payment-intent``; ``amount`` is in major units."""

    amount: float = Field(..., gt=0)
    currency: str = Field(default="usd", min_length=3, max_length=3)


class PaymentIntentResponse(CamelModel):
    """Client secret used by the browser to confirm the payment."""

    client_secret: str
