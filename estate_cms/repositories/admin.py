"""
Admin repository: the credential store behind the login flow.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from estate_cms.repositories.base import BaseRepository
from estate_cms.models.admin import Admin
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class AdminRepository(BaseRepository[Admin]):
    """
    Repository for administrator accounts.
    Passwords are hashed before they reach the database and never leave it.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Admin, db)

    async def create_admin(self, email: str, password: str, name: Optional[str] = None) -> Admin:
        """
        Create a new admin with email validation and password hashing.

        Args:
            email: Login email address
            password: Plain text password
            name: Optional display name

        Returns:
            Created admin instance

        Raises:
            ValueError: If the email is invalid, already registered or the password is too short
        """
        normalized_email = Admin.validate_email_format(email)

        existing_admin = await self.get_by_email(normalized_email)
        if existing_admin:
            raise ValueError(f"Admin with email {normalized_email} already exists")

        created_admin = await self.create({
            "email": normalized_email,
            "hashed_password": Admin.hash_password(password),
            "name": name or None,
        })
        logger.info(f"Created admin: {created_admin.email} (ID: {created_admin.id})")
        return created_admin

    async def get_by_email(self, email: str) -> Optional[Admin]:
        """
        Get admin by email address.

        Args:
            email: Email address to search for

        Returns:
            Admin instance if found, None otherwise
        """
        normalized_email = email.lower().strip()

        try:
            result = await self.db.execute(select(Admin).where(Admin.email == normalized_email))
            admin = result.scalar_one_or_none()

            if admin:
                logger.debug(f"Retrieved admin by email: {normalized_email}")
            else:
                logger.debug(f"Admin with email {normalized_email} not found")

            return admin
        except Exception as e:
            logger.error(f"Failed to get admin by email {normalized_email}: {e}")
            raise
