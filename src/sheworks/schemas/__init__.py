"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import AuthResponse, CustomerRegister, LoginRequest, ParticipantProfile, VendorRegister
from .message import MessageCreate, MessageResponse
from .notification import NotificationResponse
from .order import OrderCreate, OrderResponse
from .product import ProductCreate, ProductResponse
from .translation import TranslateRequest, TranslateResponse

__all__ = [
    "AuthResponse", "CustomerRegister", "LoginRequest", "ParticipantProfile", "VendorRegister",
    "MessageCreate", "MessageResponse",
    "NotificationResponse",
    "OrderCreate", "OrderResponse",
    "ProductCreate", "ProductResponse",
    "TranslateRequest", "TranslateResponse",
]
