"""
Property and PropertyTranslation models.
Shared listing data lives on the property row; locale-specific text lives in a
side table keyed by (property_id, locale).
"""

from sqlalchemy import (
    String, Text, Integer, Float, Boolean, JSON, Uuid,
    Enum as SQLEnum, ForeignKey, UniqueConstraint, Index
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_cms.database import Base
import enum
import uuid
from typing import Any, Dict, Iterable, List, Optional


class PropertyStatus(str, enum.Enum):
    """Listing status shown on the public site."""
    AVAILABLE = "available"
    SOLD = "sold"
    LEASED = "leased"
    UNDER_MANAGEMENT = "under-management"
    IN_DEVELOPMENT = "in-development"


class PropertyType(str, enum.Enum):
    """Property category."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    HOSPITALITY = "hospitality"
    LAND = "land"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Property(Base):
    """
    Property listing with locale-independent fields.
    Translations are loaded explicitly by the repository (lazy="raise").
    """

    __tablename__ = "properties"

    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="URL key used by the public detail page"
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, name="property_status", values_callable=_enum_values),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True
    )

    type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, name="property_type", values_callable=_enum_values),
        nullable=False,
        index=True
    )

    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Asking price in EUR"
    )

    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Year built")
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    area: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Living area in square metres"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Free-text location, e.g. 'Port Adriano, Mallorca'"
    )

    coordinates: Mapped[Optional[Dict[str, float]]] = mapped_column(
        JSON,
        nullable=True,
        comment="Map position as {lat, lng}"
    )

    featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True
    )

    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered image URLs"
    )

    translations: Mapped[List["PropertyTranslation"]] = relationship(
        "PropertyTranslation",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        order_by="PropertyTranslation.locale"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, slug={self.slug}, price={self.price})>"

    def to_dict(self, translations: Optional[Iterable["PropertyTranslation"]] = None) -> Dict[str, Any]:
        """
        Convert property to dictionary.

        Args:
            translations: Translation rows to embed. Pass None to omit the key.

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "slug": self.slug,
            "status": self.status.value,
            "type": self.type.value,
            "year": self.year,
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area": self.area,
            "location": self.location,
            "coordinates": self.coordinates,
            "featured": self.featured,
            "images": list(self.images or []),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if translations is not None:
            result["translations"] = [translation.to_dict() for translation in translations]

        return result


class PropertyTranslation(Base):
    """Locale-specific text attached to a property."""

    __tablename__ = "property_translations"
    __table_args__ = (
        UniqueConstraint("property_id", "locale", name="uq_property_translations_property_locale"),
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    locale: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    subtitle: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    features: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered feature bullet points"
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="translations",
        lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<PropertyTranslation(property_id={self.property_id}, locale={self.locale})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "property_id": str(self.property_id),
            "locale": self.locale,
            "title": self.title,
            "description": self.description,
            "subtitle": self.subtitle,
            "features": list(self.features or []),
        }


# Listing page ordering and featured carousel
featured_created_index = Index(
    "idx_properties_featured_created",
    Property.featured,
    Property.created_at.desc()
)
