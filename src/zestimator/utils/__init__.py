"""Utility modules for Zestimator."""

from .slugify import address_slug

__all__ = ["address_slug"]
