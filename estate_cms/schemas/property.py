"""
Pydantic schemas for property requests and responses.
Request bodies are validated strictly at the boundary: unknown fields are
rejected, optional numbers accept empty strings as "absent".
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional
from estate_cms.config import settings
from estate_cms.models.property import PropertyStatus, PropertyType
import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def blank_to_none(value: Any) -> Any:
    """Treat empty form values as absent."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse integers from JSON numbers or form strings ('3', '3.0')."""
    value = blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Expected an integer")
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            value = float(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("Expected a whole number")
        return int(value)
    return value


def validate_locales(translations: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if translations is None:
        return None
    unsupported = sorted(set(translations) - set(settings.supported_locales))
    if unsupported:
        raise ValueError(
            f"Unsupported locale(s): {', '.join(unsupported)}. "
            f"Supported locales: {', '.join(settings.supported_locales)}"
        )
    return translations


class Coordinates(BaseModel):
    """Map position of a property."""

    model_config = ConfigDict(extra="forbid")

    lat: float = Field(..., ge=-90, le=90, description="Latitude", examples=[39.5283])
    lng: float = Field(..., ge=-180, le=180, description="Longitude", examples=[2.5363])


class TranslationFields(BaseModel):
    """Shared cleanup for translation bodies."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator("subtitle", mode="before", check_fields=False)
    @classmethod
    def empty_subtitle(cls, v):
        return blank_to_none(v)

    @field_validator("features", mode="before", check_fields=False)
    @classmethod
    def clean_features(cls, v):
        """Drop blank bullet points left by the editor."""
        if v is None:
            return []
        if isinstance(v, list):
            return [item.strip() if isinstance(item, str) else item for item in v
                    if not (isinstance(item, str) and not item.strip())]
        return v


class TranslationInput(TranslationFields):
    """Locale-specific text for one property."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Luxury Villa with Sea Views"])
    description: str = Field(..., min_length=1, examples=["Contemporary villa above the marina."])
    subtitle: Optional[str] = Field(None, max_length=255)
    features: List[str] = Field(default_factory=list, examples=[["Infinity pool", "Sea views"]])


class TranslationUpdate(TranslationFields):
    """
    Partial translation for one locale.
    Omitted fields keep their stored value; a locale that does not exist yet
    still needs a title and a description.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    subtitle: Optional[str] = Field(None, max_length=255)
    features: Optional[List[str]] = None

    @model_validator(mode="after")
    def text_not_null(self):
        for field in ("title", "description"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class PropertyFields(BaseModel):
    """Shared validation for create and update bodies."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator("slug", mode="before", check_fields=False)
    @classmethod
    def normalize_slug(cls, v):
        if v is None:
            return v
        v = str(v).strip().lower()
        if not SLUG_PATTERN.match(v):
            raise ValueError("Slug may only contain lowercase letters, digits and single hyphens")
        return v

    @field_validator("year", "bedrooms", "bathrooms", mode="before", check_fields=False)
    @classmethod
    def coerce_optional_int(cls, v):
        return parse_optional_int(v)

    @field_validator("area", "coordinates", mode="before", check_fields=False)
    @classmethod
    def coerce_blank(cls, v):
        return blank_to_none(v)

    @field_validator("translations", check_fields=False)
    @classmethod
    def check_locales(cls, v):
        return validate_locales(v)


class PropertyCreate(PropertyFields):
    """Schema for creating a new property."""

    slug: str = Field(..., min_length=1, max_length=255, examples=["villa-test"])
    status: PropertyStatus = Field(..., examples=["available"])
    type: PropertyType = Field(..., examples=["residential"])
    year: Optional[int] = Field(None, ge=1000, le=3000, description="Year built")
    price: float = Field(..., gt=0, allow_inf_nan=False, examples=[1000000])
    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[int] = Field(None, ge=0, le=100)
    area: Optional[float] = Field(None, gt=0, allow_inf_nan=False, description="Square metres")
    location: str = Field(..., min_length=1, max_length=255, examples=["Mallorca"])
    coordinates: Optional[Coordinates] = None
    featured: bool = False
    images: List[str] = Field(default_factory=list)
    translations: Dict[str, TranslationInput] = Field(..., min_length=1)

    @field_validator("featured", mode="before")
    @classmethod
    def default_featured(cls, v):
        return False if v is None else v

    @field_validator("images", mode="before")
    @classmethod
    def default_images(cls, v):
        return [] if v is None else v

    def property_data(self) -> Dict[str, Any]:
        """Shared fields ready for the repository."""
        return self.model_dump(exclude={"translations"}, mode="python")

    def translation_data(self) -> Dict[str, Dict[str, Any]]:
        return {locale: t.model_dump() for locale, t in self.translations.items()}


class PropertyUpdate(PropertyFields):
    """
    Schema for updating an existing property.
    Only fields present in the body are written; translations are upserted per locale.
    """

    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[PropertyStatus] = None
    type: Optional[PropertyType] = None
    year: Optional[int] = Field(None, ge=1000, le=3000)
    price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    bedrooms: Optional[int] = Field(None, ge=0, le=100)
    bathrooms: Optional[int] = Field(None, ge=0, le=100)
    area: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    coordinates: Optional[Coordinates] = None
    featured: Optional[bool] = None
    images: Optional[List[str]] = None
    translations: Optional[Dict[str, TranslationUpdate]] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        """Fields that are required on create cannot be cleared."""
        for field in ("slug", "status", "type", "price", "location", "featured", "images"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def property_data(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"translations"}, exclude_unset=True, mode="python")

    def translation_data(self) -> Dict[str, Dict[str, Any]]:
        """Only the translation fields present in the body, per locale."""
        return {
            locale: t.model_dump(exclude_unset=True)
            for locale, t in (self.translations or {}).items()
        }


class PropertyTranslationResponse(BaseModel):
    """Translation row as returned by the API."""

    id: str
    property_id: str
    locale: str
    title: str
    description: str
    subtitle: Optional[str] = None
    features: List[str] = Field(default_factory=list)


class PropertyResponse(BaseModel):
    """Property as returned by the API."""

    id: str
    slug: str
    status: PropertyStatus
    type: PropertyType
    year: Optional[int] = None
    price: float
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area: Optional[float] = None
    location: str
    coordinates: Optional[Dict[str, float]] = None
    featured: bool
    images: List[str]
    created_at: str
    updated_at: str
    translations: Optional[List[PropertyTranslationResponse]] = None


class PropertyEnvelope(BaseModel):
    """Single property response body."""

    property: PropertyResponse


class PropertyListResponse(BaseModel):
    """Property list response body."""

    properties: List[PropertyResponse]


class DeleteResponse(BaseModel):
    success: bool = True
