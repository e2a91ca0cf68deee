"""Tell vendors about new orders containing their products."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import Session

from sheworks.models import Notification, Order, OrderItem

if TYPE_CHECKING:
    from sheworks.services.realtime import RealtimeChannel

# Configure logger for this module
logger = logging.getLogger(__name__)


def items_by_vendor(order: Order) -> OrderedDict[str, list[OrderItem]]:
    """Partition the order's items by vendor, keeping first-seen vendor order."""
    grouped: OrderedDict[str, list[OrderItem]] = OrderedDict()
    for item in order.items:
        grouped.setdefault(item.vendor_id, []).append(item)
    return grouped


def vendor_summary(order: Order, items: list[OrderItem]) -> dict[str, Any]:
    """Build the order summary shown to one vendor; other vendors' lines are left out."""
    return {
        "orderNumber": order.order_number,
        "customerId": order.customer_id,
        "items": [
            {
                "productId": item.product_id,
                "name": item.name,
                "quantity": item.quantity,
                "price": item.price,
                "total": item.total,
            }
            for item in items
        ],
        "total": order.total,
    }


class OrderNotificationBridge:
    """Fan a placed order out to every vendor it involves."""

    def __init__(self, db: Session, channel: RealtimeChannel | None = None) -> None:
        self.db = db
        self.channel = channel

    async def notify_order_placed(self, order: Order) -> list[Notification]:
        """Record and push one ``order_placed`` notice per distinct vendor.

        A notification row is always written. The live ``order_placed`` event
        goes only to vendors that are connected, and a failed push is logged
        without affecting the others.
        """
        notifications: list[Notification] = []
        for vendor_id, items in items_by_vendor(order).items():
            summary = vendor_summary(order, items)
            text = f"New order {order.order_number} received"

            notification = Notification(
                owner_id=vendor_id,
                owner_kind="vendor",
                kind="order",
                text=text,
                payload={"orderId": order.id, "orderSummary": summary},
            )
            self.db.add(notification)
            notifications.append(notification)

            if self.channel is None:
                continue
            try:
                await self.channel.emit(
                    vendor_id,
                    "vendor",
                    "order_placed",
                    {
                        "orderId": order.id,
                        "vendorId": vendor_id,
                        "message": text,
                        "orderSummary": summary,
                    },
                )
            except Exception as exc:
                logger.warning("Order %s push to vendor %s failed: %s", order.id, vendor_id, exc)

        self.db.commit()
        return notifications
