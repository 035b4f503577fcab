"""docima: generate images at build time and embed them in documentation.

A build script hands docima a pixel generator; docima encodes the pixels as
PNG, base64-encodes them into an <img> data URI, optionally wraps the element,
and writes the HTML fragment atomically. The documentation build then
includes the fragment verbatim.

Architecture layers (strict one-way dependency):
    build → config/orchestrator → markup/encoding → utils/

Key invariants:
    - Config is validated before any I/O or generator call
    - Existing fragments are kept when overwrite is disabled
    - Identical pixels always produce byte-identical fragments
    - Fragment files are written atomically (never partial)
"""

from .config import ImageFile, generate_image
from .errors import ConfigError, DocimaError, EncodingError, GeneratorError, IoError
from .orchestrator import GenerationResult, Orchestrator, PixelGenerator
from .settings import get_settings, load_settings
from .utils.validators import DocimaSettings, ImageConfig, Overwrite

__version__ = "0.9.1"

__all__ = [
    'ImageFile',
    'generate_image',
    'ImageConfig',
    'Overwrite',
    'Orchestrator',
    'GenerationResult',
    'PixelGenerator',
    'DocimaSettings',
    'get_settings',
    'load_settings',
    'DocimaError',
    'ConfigError',
    'GeneratorError',
    'EncodingError',
    'IoError',
]
