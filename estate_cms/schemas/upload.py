"""
Pydantic schemas for image upload responses.
"""

from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """Result of a stored image upload."""

    success: bool = True
    url: str = Field(..., description="Public URL of the stored image",
                     examples=["/uploads/properties/property-1718000000000-k3j2h1g9f8d7s.jpg"])
    filename: str = Field(..., description="Generated file name")
