"""
Property repository for listings and their per-locale translations.
Public reads join at most one translation row (the requested locale); admin
reads and writes work with the full translation set.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload
from estate_cms.repositories.base import BaseRepository
from estate_cms.models.property import Property, PropertyTranslation
from typing import Optional, List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)

NEW_TRANSLATION_FIELDS = ("title", "description")


class IncompleteTranslationError(ValueError):
    """A locale being added lacks its required text."""

    def __init__(self, locale: str, missing: List[str]):
        self.locale = locale
        self.missing = missing
        super().__init__(f"Translation '{locale}' is new and requires: {', '.join(missing)}")


class LocalizedProperty:
    """A property paired with the translation row for one locale, if any."""

    def __init__(
        self,
        property_obj: Property,
        translation: Optional[PropertyTranslation] = None,
        include_translations: bool = True
    ):
        self.property = property_obj
        self.translation = translation
        self.include_translations = include_translations

    def to_dict(self) -> Dict[str, Any]:
        if not self.include_translations:
            return self.property.to_dict()
        return self.property.to_dict(translations=[self.translation] if self.translation else [])


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property management with translation upserts.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def list_properties(
        self,
        locale: str,
        include_translations: bool = True
    ) -> List[LocalizedProperty]:
        """
        List all properties, newest first.

        Args:
            locale: Locale whose translation row is attached
            include_translations: Whether to attach translations at all

        Returns:
            List of localized properties
        """
        try:
            result = await self.db.execute(
                select(Property).order_by(desc(Property.created_at), desc(Property.id))
            )
            properties = list(result.scalars().all())

            if not include_translations:
                return [LocalizedProperty(p, include_translations=False) for p in properties]

            translations = await self._translations_for(
                [p.id for p in properties], locale
            )
            logger.debug(f"Listed {len(properties)} properties for locale {locale}")
            return [LocalizedProperty(p, translations.get(p.id)) for p in properties]
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    async def get_localized(self, property_id: uuid.UUID, locale: str) -> Optional[LocalizedProperty]:
        """Get a property by ID with its translation for `locale`."""
        property_obj = await self.get_by_id(property_id)
        if not property_obj:
            return None
        return await self._localize(property_obj, locale)

    async def get_localized_by_slug(self, slug: str, locale: str) -> Optional[LocalizedProperty]:
        """Get a property by slug with its translation for `locale`."""
        property_obj = await self.get_by_field("slug", slug)
        if not property_obj:
            return None
        return await self._localize(property_obj, locale)

    async def get_with_translations(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property with every translation row loaded.

        Args:
            property_id: UUID of the property

        Returns:
            Property with translations or None if not found
        """
        query = (
            select(Property)
            .options(selectinload(Property.translations))
            .where(Property.id == property_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def slug_taken(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(Property.id).where(Property.slug == slug)
        if exclude_id is not None:
            query = query.where(Property.id != exclude_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def create_property(
        self,
        property_data: Dict[str, Any],
        translations: Dict[str, Dict[str, Any]]
    ) -> Property:
        """
        Create a property and its translations in one transaction.

        Args:
            property_data: Shared property fields
            translations: Mapping of locale to translation fields

        Returns:
            Created property with all translations loaded

        Raises:
            ValueError: If the slug is already in use
        """
        slug = property_data["slug"]
        if await self.slug_taken(slug):
            raise ValueError(f"Property with slug '{slug}' already exists")

        try:
            property_obj = Property(**property_data)
            property_obj.translations = [
                PropertyTranslation(locale=locale, **fields)
                for locale, fields in translations.items()
            ]
            self.db.add(property_obj)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property {slug}: {e}")
            raise

        logger.info(
            f"Created property: {slug} (ID: {property_obj.id}) "
            f"with locales {sorted(translations)}"
        )
        return await self.get_with_translations(property_obj.id)

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: Dict[str, Any],
        translations: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> Optional[Property]:
        """
        Overwrite the given shared fields and upsert translations per locale.

        Locales missing from `translations` are left untouched.

        Returns:
            Updated property with all translations, None if not found

        Raises:
            ValueError: If a new slug is already in use
            IncompleteTranslationError: If a new locale lacks a title or description
        """
        property_obj = await self.get_with_translations(property_id)
        if not property_obj:
            logger.debug(f"Property with id {property_id} not found for update")
            return None

        existing = {translation.locale: translation for translation in property_obj.translations}
        for locale, fields in (translations or {}).items():
            if locale not in existing:
                missing = [field for field in NEW_TRANSLATION_FIELDS if fields.get(field) is None]
                if missing:
                    raise IncompleteTranslationError(locale, missing)

        new_slug = property_data.get("slug")
        if new_slug and new_slug != property_obj.slug and await self.slug_taken(new_slug, property_id):
            raise ValueError(f"Property with slug '{new_slug}' already exists")

        try:
            for field, value in property_data.items():
                setattr(property_obj, field, value)

            for locale, fields in (translations or {}).items():
                translation = existing.get(locale)
                if translation is None:
                    property_obj.translations.append(PropertyTranslation(locale=locale, **fields))
                else:
                    for field, value in fields.items():
                        setattr(translation, field, value)

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

        logger.info(f"Updated property {property_id}; upserted locales {sorted(translations or {})}")
        return await self.get_with_translations(property_id)

    async def delete_property(self, property_id: uuid.UUID) -> bool:
        """
        Delete a property together with all of its translations.

        Returns:
            True if deleted, False if not found
        """
        property_obj = await self.get_with_translations(property_id)
        if not property_obj:
            logger.debug(f"Property with id {property_id} not found for deletion")
            return False

        try:
            await self.db.delete(property_obj)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

        logger.info(f"Deleted property {property_id}")
        return True

    async def count_translations(self, property_id: uuid.UUID) -> int:
        """Number of translation rows stored for a property."""
        return await BaseRepository(PropertyTranslation, self.db).count(
            {"property_id": property_id}
        )

    async def _localize(self, property_obj: Property, locale: str) -> LocalizedProperty:
        translations = await self._translations_for([property_obj.id], locale)
        return LocalizedProperty(property_obj, translations.get(property_obj.id))

    async def _translations_for(
        self,
        property_ids: List[uuid.UUID],
        locale: str
    ) -> Dict[uuid.UUID, PropertyTranslation]:
        """Fetch the `locale` translation row for each property in one query."""
        if not property_ids:
            return {}

        result = await self.db.execute(
            select(PropertyTranslation).where(
                PropertyTranslation.property_id.in_(property_ids),
                PropertyTranslation.locale == locale
            )
        )
        return {translation.property_id: translation for translation in result.scalars().all()}
