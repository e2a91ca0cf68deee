"""Password hashing and access-token helpers."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from sheworks.core.settings import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PARTICIPANT_KINDS = ("customer", "vendor", "admin")


class InvalidTokenError(ValueError):
    """Raised when an access token cannot be decoded or lacks required claims."""


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    subject: str
    kind: str


def hash_password(password: str) -> str:
    """Return a bcrypt hash of ``password``."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if ``plain_password`` matches ``hashed_password``."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str, kind: str, expires_minutes: int | None = None) -> str:
    """Create a signed JWT for a participant.

    Args:
        subject: Participant identifier placed in the ``sub`` claim.
        kind: Participant kind (customer, vendor or admin).
        expires_minutes: Optional lifetime override.

    Returns:
        The encoded token.
    """
    if kind not in PARTICIPANT_KINDS:
        raise ValueError(f"Unknown participant kind: {kind}")
    lifetime = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    expire = datetime.now(UTC) + timedelta(minutes=lifetime)
    to_encode: dict[str, object] = {"sub": subject, "kind": kind, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> TokenClaims:
    """Verify ``token`` and return its claims.

    Raises:
        InvalidTokenError: If the signature, expiry or claims are invalid.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    kind = payload.get("kind")
    if not subject or kind not in PARTICIPANT_KINDS:
        raise InvalidTokenError("Could not validate credentials")
    return TokenClaims(subject=str(subject), kind=str(kind))
