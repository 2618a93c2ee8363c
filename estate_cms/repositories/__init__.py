"""
Repository layer for data access operations.
"""

from estate_cms.repositories.base import BaseRepository
from estate_cms.repositories.admin import AdminRepository
from estate_cms.repositories.property import PropertyRepository, LocalizedProperty

__all__ = [
    "BaseRepository",
    "AdminRepository",
    "PropertyRepository",
    "LocalizedProperty"
]
