"""
Database models for Estate CMS.
Includes Admin, Property and PropertyTranslation models.
"""

from estate_cms.models.admin import Admin
from estate_cms.models.property import Property, PropertyTranslation, PropertyStatus, PropertyType

# Export all models for easy importing
__all__ = [
    "Admin",
    "Property",
    "PropertyTranslation",
    "PropertyStatus",
    "PropertyType",
]
