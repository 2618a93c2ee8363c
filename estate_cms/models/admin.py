"""
Admin model for the content-management area.
Holds the credentials used to sign in to the property editor.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from estate_cms.database import Base
from estate_cms.config import settings
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from typing import Optional

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class Admin(Base):
    """
    Administrator account.
    Created by seeding or manually; never deleted in normal operation.
    """

    __tablename__ = "admins"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Admin email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Optional display name"
    )

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email={self.email})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            ValueError: If password is too short
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    def to_dict(self) -> dict:
        """
        Convert admin to dictionary (excluding the password hash).
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
        }
