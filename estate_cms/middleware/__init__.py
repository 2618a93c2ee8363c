"""
Middleware package for Estate CMS.
"""

from .validation import ValidationMiddleware

__all__ = ["ValidationMiddleware"]
