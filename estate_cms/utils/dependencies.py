"""
FastAPI dependency injection utilities for authentication and services.
The session gate reads the admin token from its cookie and guards every
mutating endpoint.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession
from estate_cms.config import settings
from estate_cms.database import get_db
from estate_cms.services.auth import AuthService
from estate_cms.services.property import PropertyService
from estate_cms.utils.auth import TokenPayload
from estate_cms.utils.exceptions import UnauthorizedError


# Cookie-carried session token
cookie_scheme = APIKeyCookie(name=settings.auth_cookie_name, auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_current_admin(
    request: Request,
    token: Optional[str] = Depends(cookie_scheme),
    auth_service: AuthService = Depends(get_auth_service)
) -> TokenPayload:
    """
    Resolve the acting admin from the session cookie.

    The verified claims are also attached to `request.state.admin` for
    downstream handlers and logging.

    Raises:
        UnauthorizedError: If no token cookie is present
        InvalidTokenError: If the token fails verification
    """
    if not token:
        raise UnauthorizedError("Not authenticated")

    claims = auth_service.resolve_token(token)
    request.state.admin = claims
    return claims
