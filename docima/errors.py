"""Exception hierarchy for image generation.

Every failure of a `generate` call is one of:
    - ConfigError: missing path, non-positive dimensions, invalid settings
    - GeneratorError: the caller's pixel generator raised (original chained)
    - EncodingError: wrong buffer length, PNG encoder failure, bad base64
    - IoError: directory creation or fragment write failed

All derive from DocimaError so build scripts can catch one type and abort.
"""


class DocimaError(Exception):
    """Base class for all docima errors."""

    pass


class ConfigError(DocimaError, ValueError):
    """Raised when an image config or the settings fail validation."""

    pass


class GeneratorError(DocimaError):
    """Raised when the pixel generator callback fails."""

    pass


class EncodingError(DocimaError):
    """Raised when pixels can't be encoded (or base64 text decoded)."""

    pass


class IoError(DocimaError):
    """Raised when the fragment can't be written to disk."""

    pass
