# src/sheworks/models/__init__.py
"""SQLAlchemy models for the SheWorks marketplace."""

from .admin import Admin
from .customer import Customer
from .message import Message
from .notification import Notification
from .order import Order, OrderItem
from .product import Product
from .review import ProductReview
from .vendor import Vendor

__all__ = [
    "Admin",
    "Customer",
    "Message",
    "Notification",
    "Order", "OrderItem",
    "Product",
    "ProductReview",
    "Vendor",
]
