"""Generation pipeline driver.

Runs one image through:
    validate config → resolve overwrite → existence check → pixel generator
    → length check → PNG → base64 → markup → atomic write

Invariants:
    - Config errors are raised before any filesystem access or generator call
    - With overwrite disabled and the target present, nothing else happens
      (the generator is not called, the file is not touched)
    - Buffer length is checked before PNG encoding starts
    - At most one write per call; the target is either the old file, absent,
      or the complete new fragment

Usage:
    from docima.orchestrator import Orchestrator
    result = Orchestrator(settings).generate(config, my_generator)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Union, runtime_checkable

from . import markup
from .encoding import raster, text
from .errors import ConfigError, EncodingError, GeneratorError, IoError
from .utils import fs, hashing
from .utils.logging_config import get_logger, log_context
from .utils.profiler import StageTimings
from .utils.validators import DocimaSettings, ImageConfig

logger = get_logger(__name__)


@runtime_checkable
class PixelGenerator(Protocol):
    """Produces an RGBA8 pixel buffer of exactly width * height * 4 bytes."""

    def generate_pixels(self, width: int, height: int) -> raster.PixelBuffer:
        ...


GeneratorLike = Union[PixelGenerator, Callable[[int, int], raster.PixelBuffer]]


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generate() call.

    `written` is False when the existing file was kept (overwrite disabled).
    """

    path: Path
    written: bool
    raster_sha256: Optional[str] = None
    fragment_bytes: int = 0


def _as_callable(generator: GeneratorLike) -> Callable[[int, int], raster.PixelBuffer]:
    if isinstance(generator, PixelGenerator):
        return generator.generate_pixels
    if callable(generator):
        return generator
    raise ConfigError(
        f"Generator must be callable or implement generate_pixels(), got {type(generator).__name__}"
    )


def _check_complete(config: ImageConfig) -> None:
    problems = []
    if not getattr(config, "path", None):
        problems.append("path is missing")
    for name in ("width", "height"):
        value = getattr(config, name, None)
        if not isinstance(value, int) or value <= 0:
            problems.append(f"{name} must be > 0, got {value!r}")
    if problems:
        raise ConfigError(f"Incomplete image config: {'; '.join(problems)}")


class Orchestrator:
    """Drives the generation pipeline under one set of process-wide settings.

    Parameters
    ----------
    settings : DocimaSettings, optional
        Defaults to docima.settings.get_settings(), resolved here once
    """

    def __init__(self, settings: Optional[DocimaSettings] = None):
        if settings is None:
            from .settings import get_settings

            settings = get_settings()
        self.settings = settings

    def generate(self, config: ImageConfig, generator: GeneratorLike) -> GenerationResult:
        """Generate the fragment described by `config`.

        Raises
        ------
        ConfigError
            Incomplete config or unusable generator
        GeneratorError
            The generator raised; the original exception is the __cause__
        EncodingError
            Wrong buffer length/type, or PNG encoding failed
        IoError
            The fragment couldn't be written
        """
        _check_complete(config)
        produce = _as_callable(generator)
        path = config.resolved_path()

        with log_context(image=config.path):
            overwrite = config.overwrite.resolve(self.settings.default_overwrite)
            if not overwrite and path.exists():
                logger.info("Keeping existing %s (overwrite disabled)", path)
                return GenerationResult(path=path, written=False)

            timings = StageTimings()

            with timings.measure("generate"):
                try:
                    pixels = produce(config.width, config.height)
                except Exception as e:
                    raise GeneratorError(f"Pixel generator failed for {config.path}: {e}") from e

            flat = raster.as_pixel_array(pixels)
            if flat.size != config.buffer_len:
                raise EncodingError(
                    f"Generator returned {flat.size} bytes for {config.width}x{config.height} "
                    f"RGBA, expected {config.buffer_len}"
                )

            with timings.measure("encode_png"):
                png = raster.encode_png(flat, config.width, config.height)

            with timings.measure("assemble"):
                fragment = markup.assemble(
                    text.encode(png),
                    config.attributes,
                    config.wrapper,
                    config.wrapper_attributes,
                )

            with timings.measure("write"):
                try:
                    fs.atomic_write_text(path, fragment)
                except UnicodeEncodeError as e:
                    raise EncodingError(f"Fragment for {config.path} is not valid UTF-8: {e}") from e
                except OSError as e:
                    raise IoError(str(e)) from e

            digest = hashing.sha256_bytes(png)
            logger.info(
                "Wrote %s (%dx%d, png %d bytes, sha256 %s)",
                path, config.width, config.height, len(png), digest[:12]
            )
            logger.debug("Stage timings: %s", timings.summary())

            return GenerationResult(
                path=path,
                written=True,
                raster_sha256=digest,
                fragment_bytes=len(fragment.encode("utf-8")),
            )
