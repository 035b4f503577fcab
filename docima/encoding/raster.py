"""PNG encoding of raw RGBA8 pixel buffers.

Output format:
    - PNG, color type RGBA, 8 bits per channel, non-interlaced
    - zlib level 9 (smallest files; build time is not critical)
    - No tIME/tEXt/pHYs chunks: identical pixels → byte-identical PNG

Pixel buffers are row-major, top row first, 4 bytes per pixel. Accepted as
bytes, bytearray, memoryview, or a uint8 numpy array of any shape.

Usage:
    from docima.encoding import raster
    png = raster.encode_png(pixels, 32, 32)
    back = raster.decode_png(png)  # (32, 32, 4) uint8
"""

import io
from typing import Union

import numpy as np
from PIL import Image

from ..errors import EncodingError
from ..utils.validators import CHANNELS

PNG_MIME = "image/png"

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


def as_pixel_array(pixels: PixelBuffer) -> np.ndarray:
    """View a pixel buffer as a flat uint8 array (no copy for bytes input).

    Raises
    ------
    EncodingError
        If the buffer type or dtype isn't supported
    """
    if isinstance(pixels, np.ndarray):
        if pixels.dtype != np.uint8:
            raise EncodingError(f"Pixel array must be uint8, got {pixels.dtype}")
        return pixels.reshape(-1)
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        return np.frombuffer(pixels, dtype=np.uint8)
    raise EncodingError(
        f"Unsupported pixel buffer type: {type(pixels).__name__} "
        "(expected bytes, bytearray, memoryview or uint8 numpy array)"
    )


def expected_length(width: int, height: int) -> int:
    """Byte length of an RGBA8 buffer of the given size."""
    return width * height * CHANNELS


def encode_png(
    pixels: PixelBuffer,
    width: int,
    height: int,
    compress_level: int = 9
) -> bytes:
    """Encode an RGBA8 pixel buffer as PNG.

    Parameters
    ----------
    pixels : PixelBuffer
        Raw pixels, exactly width * height * 4 bytes
    width, height : int
        Raster dimensions in pixels (> 0)
    compress_level : int
        zlib compression level 0-9, default 9

    Returns
    -------
    bytes
        PNG stream

    Raises
    ------
    EncodingError
        On non-positive dimensions, length mismatch, or encoder failure
    """
    if width <= 0 or height <= 0:
        raise EncodingError(f"Raster dimensions must be positive, got {width}x{height}")

    flat = as_pixel_array(pixels)
    expected = expected_length(width, height)
    if flat.size != expected:
        raise EncodingError(
            f"Pixel buffer has {flat.size} bytes, expected {expected} "
            f"({width}x{height}x{CHANNELS})"
        )

    buf = io.BytesIO()
    try:
        img = Image.frombytes("RGBA", (width, height), flat.tobytes())
        img.save(buf, format="PNG", compress_level=compress_level)
    except (OSError, ValueError) as e:
        raise EncodingError(f"PNG encoding failed: {e}") from e
    return buf.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    """Decode a PNG stream to an (H, W, 4) uint8 array.

    Raises
    ------
    EncodingError
        If the data isn't a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return np.asarray(img.convert("RGBA"), dtype=np.uint8).copy()
    except (OSError, ValueError) as e:
        raise EncodingError(f"PNG decoding failed: {e}") from e
