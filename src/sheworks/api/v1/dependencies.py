"""Shared API dependencies for authentication, throttling and app-wide services."""

from typing import Annotated, Union

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sheworks.core.security import InvalidTokenError, decode_access_token
from sheworks.db.session import get_db
from sheworks.models import Admin, Customer, Vendor
from sheworks.services.messaging import load_participant
from sheworks.services.payments import PaymentClient
from sheworks.services.rate_limit import RateLimiter
from sheworks.services.realtime import RealtimeChannel
from sheworks.services.translation import TranslationGateway

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

Participant = Union[Customer, Vendor, Admin]


def get_current_participant(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> Participant:
    """Get the authenticated customer, vendor or admin from the JWT.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        The participant named by the token's ``sub`` and ``kind`` claims

    Raises:
        HTTPException: If the token is invalid or the participant no longer exists
    """
    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    participant = load_participant(db, claims.subject, claims.kind)
    if participant is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return participant


# Type alias for current participant dependency
CurrentParticipantDep = Annotated[Participant, Depends(get_current_participant)]


def require_customer(participant: CurrentParticipantDep) -> Customer:
    if not isinstance(participant, Customer):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only customers can perform this action",
        )
    return participant


def require_vendor(participant: CurrentParticipantDep) -> Vendor:
    if not isinstance(participant, Vendor):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only vendors can perform this action",
        )
    return participant


def require_admin(participant: CurrentParticipantDep) -> Admin:
    if not isinstance(participant, Admin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return participant


def require_messaging_participant(participant: CurrentParticipantDep) -> Customer | Vendor:
    """Allow customers and vendors, the two kinds that can hold conversations."""
    if not isinstance(participant, (Customer, Vendor)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only customers and vendors can use messaging",
        )
    return participant


CustomerDep = Annotated[Customer, Depends(require_customer)]
VendorDep = Annotated[Vendor, Depends(require_vendor)]
AdminDep = Annotated[Admin, Depends(require_admin)]
MessagingParticipantDep = Annotated[Union[Customer, Vendor], Depends(require_messaging_participant)]


def get_translation_gateway(request: Request) -> TranslationGateway:
    return request.app.state.translation_gateway


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.translation_rate_limiter


def get_realtime_channel(request: Request) -> RealtimeChannel:
    return request.app.state.realtime_channel


def get_payment_client(request: Request) -> PaymentClient:
    return request.app.state.payment_client


TranslationGatewayDep = Annotated[TranslationGateway, Depends(get_translation_gateway)]
RealtimeChannelDep = Annotated[RealtimeChannel, Depends(get_realtime_channel)]
PaymentClientDep = Annotated[PaymentClient, Depends(get_payment_client)]


def quota_identity(request: Request, participant: Participant | None) -> str:
    """Key a caller's quota by participant, falling back to the client address."""
    if participant is not None:
        return f"{participant.kind}:{participant.id}"
    return request.client.host if request.client else "anonymous"


def enforce_translation_quota(
    request: Request,
    participant: CurrentParticipantDep,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Charge one translation request to the caller.

    Raises:
        RateLimitExceeded: Once the window's quota is spent; rendered as 429
            by the application's exception handler
    """
    limiter.check(quota_identity(request, participant))


TranslationQuotaDep = Depends(enforce_translation_quota)
