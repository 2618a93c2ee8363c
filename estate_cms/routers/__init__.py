"""
API routers for Estate CMS.
"""

from . import auth, properties, upload

__all__ = ["auth", "properties", "upload"]
