# src/sheworks/schemas/auth.py
"""Registration, login and profile schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from sheworks.models.vendor import VENDOR_CATEGORIES

from .common import CamelModel
from .message import LanguageCode

VendorCategory = Literal[VENDOR_CATEGORIES]  # type: ignore[valid-type]


class CustomerRegister(CamelModel):
    """Body of ``POST /auth/register/customer``."""

    username: str = Field(..., min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    preferred_language: LanguageCode = "en"


class VendorRegister(CamelModel):
    """Body of ``POST /auth/register/vendor``."""

    business_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    contact_first_name: str = Field(..., min_length=1, max_length=100)
    contact_last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=32)
    category: VendorCategory
    preferred_language: LanguageCode = "en"


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ParticipantProfile(CamelModel):
    """Public profile of any participant kind."""

    id: str
    kind: str
    email: str
    name: str
    preferred_language: str = "en"
    status: str | None = None
    last_login: datetime | None = None
    created_at: datetime


class AuthResponse(CamelModel):
    """Access token together with the participant it was issued for."""

    message: str
    token: str
    participant: ParticipantProfile
