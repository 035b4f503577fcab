"""Schema validation for image configurations and process-wide settings.

Provides centralized validation using pydantic:
    - Image config (ImageConfig): output path, dimensions, <img> and wrapper
      attributes, overwrite policy; frozen once built
    - Settings schema (docima.v1 / docima.yaml): default overwrite policy,
      build gating, log level

All modules must use these validators for fail-fast error detection with
actionable messages (offending field, expected range). Validation failures
surface as ValueError; upper layers translate them to docima.errors.ConfigError.

Units:
    - Dimensions: pixels
    - Pixel buffers: RGBA, 8 bits per channel (4 bytes per pixel)

Usage:
    from docima.utils import validators

    cfg = validators.validate_image_config({"path": "images/a.html", "width": 32, "height": 32})
    settings = validators.load_settings_file("docima.yaml")
"""

import enum
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# RGBA8: red, green, blue, alpha
CHANNELS = 4

SETTINGS_SCHEMA = "docima.v1"


def format_validation_error(err: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one actionable line.

    Examples
    --------
    >>> format_validation_error(err)
    'width: Input should be greater than 0; path: path must not be empty'
    """
    parts = []
    for item in err.errors():
        loc = '.'.join(str(p) for p in item.get('loc', ())) or '<root>'
        parts.append(f"{loc}: {item.get('msg', 'invalid value')}")
    return '; '.join(parts)


# ============================================================================
# IMAGE CONFIG
# ============================================================================

class Overwrite(str, enum.Enum):
    """Tri-state overwrite policy of a single image.

    UNSET defers to the process-wide default, resolved at generation time.
    """
    UNSET = "unset"
    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def from_flag(cls, flag: Optional[bool]) -> 'Overwrite':
        """Map True/False/None to ENABLED/DISABLED/UNSET."""
        if flag is None:
            return cls.UNSET
        return cls.ENABLED if flag else cls.DISABLED

    def resolve(self, default: bool) -> bool:
        """Effective policy: the explicit value, else `default`."""
        if self is Overwrite.UNSET:
            return default
        return self is Overwrite.ENABLED


Attribute = Tuple[str, str]


def _check_utf8(text: str, what: str) -> None:
    """Fragments are written as UTF-8; lone surrogates can't be."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"{what} is not valid UTF-8 text: {e.reason} at index {e.start}") from e


class ImageConfig(BaseModel):
    """Immutable snapshot of one image to generate.

    `attributes` and `wrapper_attributes` are ordered; duplicate names are
    kept as given and rendered in insertion order.
    """
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Output fragment path (absolute or project-relative)")
    width: int = Field(..., gt=0, description="Raster width in pixels")
    height: int = Field(..., gt=0, description="Raster height in pixels")
    attributes: Tuple[Attribute, ...] = Field((), description="<img> attributes, in order")
    wrapper: Optional[str] = Field(None, description="Wrapper element name")
    wrapper_attributes: Tuple[Attribute, ...] = Field((), description="Wrapper attributes, in order")
    overwrite: Overwrite = Overwrite.UNSET
    root: Optional[str] = Field(None, description="Base directory for a relative path")

    @field_validator('path', 'root', mode='before')
    @classmethod
    def coerce_pathlike(cls, v: Any) -> Any:
        if isinstance(v, os.PathLike):
            return os.fspath(v)
        return v

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("path must not be empty")
        return v

    @field_validator('wrapper')
    @classmethod
    def validate_wrapper(cls, v: Optional[str]) -> Optional[str]:
        # An empty wrapper means "no wrapper"
        if v:
            _check_utf8(v, "wrapper")
        return v or None

    @field_validator('attributes', 'wrapper_attributes')
    @classmethod
    def validate_attribute_text(cls, v: Tuple[Attribute, ...]) -> Tuple[Attribute, ...]:
        for name, value in v:
            _check_utf8(name, "attribute name")
            _check_utf8(value, f"attribute {name!r}")
        return v

    @property
    def buffer_len(self) -> int:
        """Exact byte length of the RGBA pixel buffer for these dimensions."""
        return self.width * self.height * CHANNELS

    def resolved_path(self) -> Path:
        """Absolute output path (see fs.resolve_output_path)."""
        from . import fs

        return fs.resolve_output_path(self.path, self.root)


def validate_image_config(data: Dict[str, Any]) -> ImageConfig:
    """Validate raw builder fields into an ImageConfig.

    Parameters
    ----------
    data : Dict[str, Any]
        Field values; missing required fields are reported by name

    Returns
    -------
    ImageConfig
        Frozen configuration

    Raises
    ------
    ValueError
        If validation fails (with actionable error message)
    """
    try:
        return ImageConfig(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid image config: {format_validation_error(e)}") from e


# ============================================================================
# SETTINGS SCHEMA V1
# ============================================================================

class DocimaSettings(BaseModel):
    """Process-wide settings (docima.yaml schema).

    `default_overwrite` applies only to images that leave overwrite unset.
    `build_when_doc` + `doc` form the gating toggle used by docima.build.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: str = Field(SETTINGS_SCHEMA, alias="schema", description="Schema version")
    default_overwrite: bool = Field(True, description="Overwrite existing fragments by default")
    build_when_doc: bool = Field(False, description="Only build images when `doc` is also set")
    doc: bool = Field(False, description="Documentation build in progress")
    skip_env: Tuple[str, ...] = Field(("DOCS_RS",), description="Env vars that skip the build step")
    log_level: str = Field("INFO", description="Log level for build scripts")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SETTINGS_SCHEMA:
            raise ValueError(f"Expected schema '{SETTINGS_SCHEMA}', got '{v}'")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"log_level must be a logging level name, got '{v}'")
        return v


def validate_settings(data: Dict[str, Any]) -> DocimaSettings:
    """Validate a settings mapping.

    Raises
    ------
    ValueError
        If validation fails (with actionable error message)
    """
    try:
        return DocimaSettings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid docima settings: {format_validation_error(e)}") from e


def load_settings_file(path: Union[str, Path]) -> DocimaSettings:
    """Load and validate settings from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to docima.yaml

    Returns
    -------
    DocimaSettings
        Validated settings

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If the YAML is malformed or validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(str(e)) from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping, got {type(data).__name__}")

    try:
        return DocimaSettings(**data)
    except ValidationError as e:
        raise ValueError(
            f"Settings validation failed at {path}: {format_validation_error(e)}"
        ) from e
