"""
Authentication service for admin login and session resolution.
Handles credential checks against the admin store and token issuance.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from estate_cms.repositories.admin import AdminRepository
from estate_cms.models.admin import Admin, pwd_context
from estate_cms.utils.auth import create_access_token, verify_token, TokenPayload
from estate_cms.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ValidationError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for the admin area.
    Login is a two-state flow: anonymous until a valid (email, password) pair
    yields a signed token, authenticated while that token verifies.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.admin_repo = AdminRepository(db_session)

    async def authenticate_admin(self, email: str, password: str) -> Admin:
        """
        Check an email/password pair against the credential store.

        Unknown email and wrong password fail identically so accounts cannot
        be enumerated.

        Args:
            email: Admin's email address
            password: Plain text password

        Returns:
            Authenticated Admin object

        Raises:
            ValidationError: If either field is empty
            InvalidCredentialsError: If credentials do not match
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        if not password:
            raise ValidationError("Password is required")

        admin = await self.admin_repo.get_by_email(email)

        if admin is None:
            # Spend comparable time to a real hash check
            pwd_context.dummy_verify()
            logger.warning(f"Failed login attempt for unknown email: {email}")
            raise InvalidCredentialsError()

        if not admin.verify_password(password):
            logger.warning(f"Failed login attempt for {admin.email}")
            raise InvalidCredentialsError()

        logger.info(f"Admin authenticated successfully: {admin.email}")
        return admin

    def create_token(self, admin: Admin) -> str:
        """Issue a session token embedding the admin's id and email."""
        return create_access_token(admin_id=admin.id, email=admin.email)

    async def login(self, email: str, password: str) -> Tuple[Admin, str]:
        """
        Authenticate admin and issue a session token.

        Returns:
            Tuple of (admin, token)
        """
        admin = await self.authenticate_admin(email, password)
        return admin, self.create_token(admin)

    def resolve_token(self, token: Optional[str]) -> TokenPayload:
        """
        Verify a session token.

        Raises:
            InvalidTokenError: If the token is malformed, expired or forged
        """
        payload = verify_token(token)
        if payload is None:
            raise InvalidTokenError()
        return payload

    async def get_admin(self, admin_id: str) -> Admin:
        """
        Fetch a fresh admin record for verified claims.

        Raises:
            NotFoundError: If the admin no longer exists
        """
        admin = await self.admin_repo.get_by_id(uuid.UUID(admin_id))
        if admin is None:
            logger.warning(f"Token references missing admin {admin_id}")
            raise NotFoundError("Admin")
        return admin
