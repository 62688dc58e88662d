"""
Common types shared across modules.

This module provides standardized data types for the barcode bridge,
ensuring consistency and type safety between image loading, configuration
and the decode call.
"""

from src.common.types import GrayscaleImage, RegionOfInterest

__all__ = ["GrayscaleImage", "RegionOfInterest"]
