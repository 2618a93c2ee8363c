"""
Property service for managing listings and their translations.
Translates repository results and failures into API-level outcomes.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from estate_cms.config import settings
from estate_cms.repositories.property import PropertyRepository, LocalizedProperty, IncompleteTranslationError
from estate_cms.models.property import Property
from estate_cms.schemas.property import PropertyCreate, PropertyUpdate
from estate_cms.utils.auth import TokenPayload
from estate_cms.utils.exceptions import (
    PropertyNotFoundError,
    NotFoundError,
    ValidationError,
    DuplicateResourceError
)
import uuid
import logging

logger = logging.getLogger(__name__)


def resolve_locale(locale: Optional[str]) -> str:
    """
    Return the requested locale, or the configured fallback when none is given.

    Raises:
        ValidationError: If the locale is not supported
    """
    if not locale:
        return settings.default_locale

    locale = locale.lower()
    if locale not in settings.supported_locales:
        raise ValidationError(
            f"Unsupported locale '{locale}'. "
            f"Supported locales: {', '.join(settings.supported_locales)}"
        )
    return locale


class PropertyService:
    """
    Property service for public reads and admin writes.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    async def list_properties(
        self,
        locale: Optional[str] = None,
        include_translations: bool = True
    ) -> List[LocalizedProperty]:
        """List properties newest first with the translation for `locale`."""
        return await self.property_repo.list_properties(
            resolve_locale(locale), include_translations
        )

    async def get_property(self, property_id: uuid.UUID, locale: Optional[str] = None) -> LocalizedProperty:
        """
        Get a property with its locale-matched translation.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
        """
        localized = await self.property_repo.get_localized(property_id, resolve_locale(locale))
        if localized is None:
            raise PropertyNotFoundError(str(property_id))
        return localized

    async def get_property_by_slug(self, slug: str, locale: Optional[str] = None) -> LocalizedProperty:
        """
        Get a property by its URL slug.

        Raises:
            NotFoundError: If no property uses the slug
        """
        localized = await self.property_repo.get_localized_by_slug(slug, resolve_locale(locale))
        if localized is None:
            raise NotFoundError("Property", slug)
        return localized

    async def create_property(self, property_data: PropertyCreate, admin: TokenPayload) -> Property:
        """
        Create a property with its translations.

        Raises:
            DuplicateResourceError: If the slug is already in use
        """
        try:
            property_obj = await self.property_repo.create_property(
                property_data.property_data(),
                property_data.translation_data()
            )
        except ValueError as e:
            logger.warning(f"Property creation rejected for {admin.email}: {e}")
            raise DuplicateResourceError("Property", property_data.slug)

        logger.info(f"Property created by {admin.email}: {property_obj.slug} (ID: {property_obj.id})")
        return property_obj

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        admin: TokenPayload
    ) -> Property:
        """
        Update shared fields and upsert translations.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            DuplicateResourceError: If the new slug is already in use
            ValidationError: If a new locale lacks a title or description
        """
        try:
            property_obj = await self.property_repo.update_property(
                property_id,
                property_data.property_data(),
                property_data.translation_data()
            )
        except IncompleteTranslationError as e:
            raise ValidationError(
                str(e),
                field_errors=[
                    {"field": f"translations -> {e.locale} -> {field}", "message": "Field required"}
                    for field in e.missing
                ]
            )
        except ValueError as e:
            logger.warning(f"Property update rejected for {admin.email}: {e}")
            raise DuplicateResourceError("Property", property_data.slug)

        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))

        logger.info(f"Property updated by {admin.email}: {property_obj.slug} (ID: {property_obj.id})")
        return property_obj

    async def delete_property(self, property_id: uuid.UUID, admin: TokenPayload) -> None:
        """
        Delete a property and its translations.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
        """
        deleted = await self.property_repo.delete_property(property_id)
        if not deleted:
            raise PropertyNotFoundError(str(property_id))

        logger.info(f"Property deleted by {admin.email}: {property_id}")
