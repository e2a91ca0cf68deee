# src/sheworks/api/v1/endpoints/orders.py
"""Order and checkout endpoints for the SheWorks API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from sheworks.models import Admin, Customer, Order, Vendor
from sheworks.schemas.order import (
    OrderCreate,
    OrderEnvelope,
    OrderList,
    OrderResponse,
    OrderStatusUpdate,
    PaymentIntentRequest,
    PaymentIntentResponse,
)
from sheworks.services import orders as order_service
from sheworks.services.order_notifications import OrderNotificationBridge
from sheworks.services.payments import PaymentError, PaymentsDisabledError

from ..dependencies import (
    CurrentParticipantDep,
    CustomerDep,
    Participant,
    PaymentClientDep,
    RealtimeChannelDep,
    SessionDep,
    VendorDep,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def _can_view(participant: Participant, order: Order) -> bool:
    if isinstance(participant, Admin):
        return True
    if isinstance(participant, Customer):
        return order.customer_id == participant.id
    return participant.id in order.vendor_ids


def _get_order(db: Session, order_id: str) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.post("/", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def place_order(
    payload: OrderCreate,
    customer: CustomerDep,
    db: SessionDep,
    channel: RealtimeChannelDep,
) -> OrderEnvelope:
    """Place an order and notify every vendor whose products it contains."""
    try:
        order = order_service.place_order(db, customer, payload)
    except order_service.ProductNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except order_service.InsufficientStockError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    await OrderNotificationBridge(db, channel).notify_order_placed(order)
    return OrderEnvelope(order=OrderResponse.model_validate(order))


@router.get("/my", response_model=OrderList)
async def my_orders(customer: CustomerDep, db: SessionDep) -> OrderList:
    orders = order_service.orders_for_customer(db, customer.id)
    return OrderList(orders=[OrderResponse.model_validate(order) for order in orders])


@router.get("/vendor", response_model=OrderList)
async def vendor_orders(vendor: VendorDep, db: SessionDep) -> OrderList:
    """Orders containing at least one of the vendor's products."""
    orders = order_service.orders_for_vendor(db, vendor.id)
    return OrderList(orders=[OrderResponse.model_validate(order) for order in orders])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: PaymentIntentRequest,
    customer: CustomerDep,
    payments: PaymentClientDep,
) -> PaymentIntentResponse:
    """Create a card payment intent with the payment processor."""
    try:
        secret = await payments.create_payment_intent(payload.amount, payload.currency)
    except PaymentsDisabledError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except PaymentError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to create payment intent",
        ) from exc
    return PaymentIntentResponse(client_secret=secret)


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(order_id: str, current: CurrentParticipantDep, db: SessionDep) -> OrderEnvelope:
    order = _get_order(db, order_id)
    if not _can_view(current, order):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return OrderEnvelope(order=OrderResponse.model_validate(order))


@router.put("/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    current: CurrentParticipantDep,
    db: SessionDep,
) -> OrderEnvelope:
    """Move an order along its lifecycle; allowed for involved vendors and admins."""
    order = _get_order(db, order_id)
    if not (
        isinstance(current, Admin)
        or (isinstance(current, Vendor) and current.id in order.vendor_ids)
    ):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")

    order = order_service.update_status(db, order, payload.status, current.kind, payload.note)
    logger.info("Order %s moved to %s by %s %s", order.id, order.status, current.kind, current.id)
    return OrderEnvelope(order=OrderResponse.model_validate(order))
