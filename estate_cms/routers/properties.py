"""
Property API endpoints.
Reads are public and locale-aware; writes require an admin session.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional
from uuid import UUID

from estate_cms.services.property import PropertyService
from estate_cms.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyEnvelope,
    PropertyListResponse,
    DeleteResponse
)
from estate_cms.utils.auth import TokenPayload
from estate_cms.utils.dependencies import get_current_admin, get_property_service


router = APIRouter(prefix="/properties", tags=["Properties"])


def _envelope(data: dict) -> PropertyEnvelope:
    return PropertyEnvelope(property=PropertyResponse.model_validate(data))


@router.get(
    "",
    response_model=PropertyListResponse,
    response_model_exclude_unset=True,
    summary="List properties",
    description="List all properties newest first, each with at most the translation for the requested locale"
)
async def list_properties(
    locale: Optional[str] = Query(None, description="Locale code (falls back to the default locale)"),
    include_translations: bool = Query(
        True,
        alias="includeTranslations",
        description="Attach the locale's translation row"
    ),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    properties = await property_service.list_properties(locale, include_translations)
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(p.to_dict()) for p in properties]
    )


@router.get(
    "/slug/{slug}",
    response_model=PropertyEnvelope,
    response_model_exclude_unset=True,
    summary="Get property by slug",
    description="Resolve a property by its URL slug"
)
async def get_property_by_slug(
    slug: str = Path(..., description="Property URL slug"),
    locale: Optional[str] = Query(None, description="Locale code"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    localized = await property_service.get_property_by_slug(slug, locale)
    return _envelope(localized.to_dict())


@router.get(
    "/{property_id}",
    response_model=PropertyEnvelope,
    response_model_exclude_unset=True,
    summary="Get property by ID",
    description="Retrieve a single property with the translation for the requested locale"
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    locale: Optional[str] = Query(None, description="Locale code"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    """
    Raises:
        PropertyNotFoundError: If property doesn't exist
    """
    localized = await property_service.get_property(property_id, locale)
    return _envelope(localized.to_dict())


@router.post(
    "",
    response_model=PropertyEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a property and its translations in one transaction. Requires an admin session."
)
async def create_property(
    property_data: PropertyCreate,
    admin: TokenPayload = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    """
    Create a new property listing.

    Raises:
        UnauthorizedError: If no valid session cookie is present
        DuplicateResourceError: If the slug is already in use
    """
    property_obj = await property_service.create_property(property_data, admin)
    return _envelope(property_obj.to_dict(translations=property_obj.translations))


@router.put(
    "/{property_id}",
    response_model=PropertyEnvelope,
    summary="Update property",
    description="Update supplied fields and upsert the supplied translations. Requires an admin session."
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    admin: TokenPayload = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyEnvelope:
    """
    Partially update a property.

    Locales absent from the payload keep their existing translation rows.

    Raises:
        PropertyNotFoundError: If property doesn't exist
        DuplicateResourceError: If the new slug is already in use
    """
    property_obj = await property_service.update_property(property_id, property_data, admin)
    return _envelope(property_obj.to_dict(translations=property_obj.translations))


@router.delete(
    "/{property_id}",
    response_model=DeleteResponse,
    summary="Delete property",
    description="Delete a property and all of its translations. Requires an admin session."
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    admin: TokenPayload = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> DeleteResponse:
    await property_service.delete_property(property_id, admin)
    return DeleteResponse(success=True)
