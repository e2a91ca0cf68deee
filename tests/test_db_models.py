"""Unit tests for the ORM models defined in sheworks.models.

These tests cover table naming, the message state helpers and the small
derived properties the API relies on.
"""

from sqlalchemy.orm import attributes

from sheworks import models
from sheworks.models.message import MESSAGE_STATUS_DELIVERED, MESSAGE_STATUS_READ


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert models.Customer.__tablename__ == "customer"
    assert models.Vendor.__tablename__ == "vendor"
    assert models.Order.__tablename__ == "customer_order"
    assert models.OrderItem.__tablename__ == "order_item"
    assert models.Message.__tablename__ == "message"
    assert models.Notification.__tablename__ == "notification"
    assert models.ProductReview.__tablename__ == "product_review"


def test_order_items_relationship_is_instrumented():
    assert isinstance(models.Order.items, attributes.InstrumentedAttribute)
    assert isinstance(models.OrderItem.order, attributes.InstrumentedAttribute)


def test_message_state_helpers():
    """sent -> delivered -> read; delivery never downgrades a read message."""
    message = models.Message(
        sender_id="a", sender_kind="customer", recipient_id="b", recipient_kind="vendor", text="hi"
    )
    message.status = "sent"

    message.mark_delivered()
    assert message.status == MESSAGE_STATUS_DELIVERED

    message.mark_read()
    assert message.status == MESSAGE_STATUS_READ
    assert message.read_at is not None

    message.mark_delivered()
    assert message.status == MESSAGE_STATUS_READ


def test_participant_kinds_and_names(customer, vendor, admin):
    assert (customer.kind, vendor.kind, admin.kind) == ("customer", "vendor", "admin")
    assert customer.display_name == "Amara Diallo"
    assert vendor.display_name == "Atelier Amani"
    assert admin.display_name == "Root"


def test_vendor_is_active_follows_status(vendor):
    assert vendor.is_active
    vendor.status = "suspended"
    assert not vendor.is_active


def test_ids_are_generated(customer, product):
    assert len(customer.id) == 32
    assert len(product.id) == 32
    assert product.currency == "USD"
    assert product.is_active is True
