"""
Authentication utilities for session token management.
Issues and verifies the signed, time-limited JWTs carried in the admin cookie.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from estate_cms.config import settings
import logging
import uuid

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


class TokenPayload:
    """Claims embedded in a session token."""

    def __init__(self, admin_id: str, email: str, exp: datetime):
        self.admin_id = admin_id
        self.email = email
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from a decoded claim set."""
        return cls(
            admin_id=data["sub"],
            email=data["email"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )

    def __repr__(self) -> str:
        return f"<TokenPayload(admin_id={self.admin_id}, email={self.email})>"


def create_access_token(
    admin_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed session token for an admin.

    Args:
        admin_id: Admin's UUID
        email: Admin's email address
        expires_delta: Optional custom lifetime (defaults to 7 days)

    Returns:
        Encoded JWT token string
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)

    to_encode = {
        "sub": str(admin_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "type": ACCESS_TOKEN_TYPE
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def verify_token(token: str) -> Optional[TokenPayload]:
    """
    Verify and decode a session token.

    Signature and expiry are checked by python-jose. Any failure (malformed,
    expired, bad signature, wrong type, missing claims) yields None.

    Args:
        token: JWT token string

    Returns:
        TokenPayload if valid, None otherwise
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        logger.debug("Token rejected: unexpected token type")
        return None

    if not payload.get("sub") or not payload.get("email") or "exp" not in payload:
        logger.debug("Token rejected: missing claims")
        return None

    try:
        uuid.UUID(payload["sub"])
        return TokenPayload.from_dict(payload)
    except (AttributeError, TypeError, ValueError, OverflowError) as e:
        logger.debug(f"Token rejected: malformed claims ({e})")
        return None
