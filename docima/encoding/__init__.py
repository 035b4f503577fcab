"""Byte-level encoders: pixels → PNG (raster) and bytes → base64 text (text)."""

from . import raster
from . import text

__all__ = ['raster', 'text']
