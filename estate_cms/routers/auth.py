"""
Authentication API endpoints: login, logout and the current-admin check.
The session token is carried in an HttpOnly cookie rather than a header.
"""

from fastapi import APIRouter, Depends, Response, status
from estate_cms.config import settings
from estate_cms.services.auth import AuthService
from estate_cms.schemas.auth import (
    LoginRequest,
    LoginResponse,
    AdminResponse,
    CurrentAdminResponse,
    LogoutResponse
)
from estate_cms.utils.auth import TokenPayload
from estate_cms.utils.dependencies import get_auth_service, get_current_admin


router = APIRouter(prefix="/auth", tags=["Authentication"])


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/"
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin login",
    description="Authenticate with email and password; sets the admin_token cookie"
)
async def login(
    login_data: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate an admin and start a session.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    admin, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    set_session_cookie(response, token)

    return LoginResponse(admin=AdminResponse.model_validate(admin.to_dict()))


@router.get(
    "/me",
    response_model=CurrentAdminResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current admin",
    description="Return the admin identified by the session cookie"
)
async def get_current_admin_info(
    claims: TokenPayload = Depends(get_current_admin),
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentAdminResponse:
    admin = await auth_service.get_admin(claims.admin_id)
    return CurrentAdminResponse(admin=AdminResponse.model_validate(admin.to_dict()))


@router.post(
    "/logout",
    response_model=LogoutResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin logout",
    description="Clear the session cookie"
)
async def logout(response: Response) -> LogoutResponse:
    """
    Clear the session cookie.

    Tokens are stateless, so there is nothing to invalidate server-side; a
    copied token stays valid until it expires.
    """
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax"
    )
    return LogoutResponse()
