"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    LoginRequest,
    LoginResponse,
    AdminResponse,
    CurrentAdminResponse,
    LogoutResponse
)

# Property schemas
from .property import (
    Coordinates,
    TranslationInput,
    TranslationUpdate,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyTranslationResponse,
    PropertyEnvelope,
    PropertyListResponse,
    DeleteResponse
)

# Upload schemas
from .upload import ImageUploadResponse

__all__ = [
    # Authentication
    "LoginRequest",
    "LoginResponse",
    "AdminResponse",
    "CurrentAdminResponse",
    "LogoutResponse",

    # Properties
    "Coordinates",
    "TranslationInput",
    "TranslationUpdate",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyTranslationResponse",
    "PropertyEnvelope",
    "PropertyListResponse",
    "DeleteResponse",

    # Uploads
    "ImageUploadResponse",
]
