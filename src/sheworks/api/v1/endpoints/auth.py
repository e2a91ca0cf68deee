# src/sheworks/api/v1/endpoints/auth.py
"""Authentication endpoints for the SheWorks API."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import func, or_, select

from sheworks.core.security import create_access_token, hash_password, verify_password
from sheworks.db.time import utcnow
from sheworks.models import Admin, Customer, Vendor
from sheworks.models.vendor import VENDOR_STATUS_SUSPENDED
from sheworks.schemas.auth import (
    AuthResponse,
    CustomerRegister,
    LoginRequest,
    ParticipantProfile,
    VendorRegister,
)

from ..dependencies import CurrentParticipantDep, Participant, SessionDep

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

_LOGIN_MODELS: dict[str, type[Customer] | type[Vendor] | type[Admin]] = {
    "customer": Customer,
    "vendor": Vendor,
    "admin": Admin,
}


def profile_of(participant: Participant) -> ParticipantProfile:
    """Render any participant kind as a public profile."""
    return ParticipantProfile(
        id=participant.id,
        kind=participant.kind,
        email=participant.email,
        name=participant.display_name,
        preferred_language=getattr(participant, "preferred_language", "en"),
        status=getattr(participant, "status", None),
        last_login=getattr(participant, "last_login", None),
        created_at=participant.created_at,
    )


def _issue(participant: Participant, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(participant.id, participant.kind),
        participant=profile_of(participant),
    )


@router.post("/register/customer", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_customer(payload: CustomerRegister, db: SessionDep) -> AuthResponse:
    """Create a customer account and log it in."""
    email = payload.email.lower()
    existing = db.scalar(
        select(Customer).where(
            or_(func.lower(Customer.email) == email, Customer.username == payload.username)
        )
    )
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists",
        )

    customer = Customer(
        username=payload.username,
        email=email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        preferred_language=payload.preferred_language,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info("Registered customer %s", customer.id)
    return _issue(customer, "User registered successfully")


@router.post("/register/vendor", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_vendor(payload: VendorRegister, db: SessionDep) -> AuthResponse:
    """Create a vendor account awaiting admin approval."""
    email = payload.email.lower()
    if db.scalar(select(Vendor).where(func.lower(Vendor.email) == email)) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vendor with this email already exists",
        )

    vendor = Vendor(
        business_name=payload.business_name,
        email=email,
        password_hash=hash_password(payload.password),
        contact_first_name=payload.contact_first_name,
        contact_last_name=payload.contact_last_name,
        phone=payload.phone,
        category=payload.category,
        preferred_language=payload.preferred_language,
    )
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    logger.info("Registered vendor %s", vendor.id)
    return _issue(vendor, "Vendor registered successfully")


@router.post("/login/{kind}", response_model=AuthResponse)
async def login(
    kind: Literal["customer", "vendor", "admin"],
    payload: LoginRequest,
    db: SessionDep,
) -> AuthResponse:
    """Exchange email and password for an access token."""
    model = _LOGIN_MODELS[kind]
    participant = db.scalar(select(model).where(func.lower(model.email) == payload.email.lower()))
    if participant is None or not verify_password(payload.password, participant.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if isinstance(participant, Customer) and not participant.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is suspended")
    if isinstance(participant, Vendor) and participant.status == VENDOR_STATUS_SUSPENDED:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Vendor is suspended")

    if not isinstance(participant, Admin):
        participant.last_login = utcnow()
        db.commit()
        db.refresh(participant)
    return _issue(participant, "Login successful")


@router.get("/me", response_model=ParticipantProfile)
async def read_me(current: CurrentParticipantDep) -> ParticipantProfile:
    return profile_of(current)
