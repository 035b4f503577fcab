"""Chainable image configuration builder.

Every setter stores its value and returns the builder; nothing is validated
until build() or generate(), so all problems are reported together.

Usage::

    from docima import ImageFile

    ImageFile() \\
        .path("images/histogram.html") \\
        .width(400) \\
        .height(300) \\
        .attr("title", "an example histogram") \\
        .wrapper("div") \\
        .wrapper_attr("style", "padding: 10px;") \\
        .overwrite(True) \\
        .generate(plot_histogram)
"""

from __future__ import annotations

import os
from typing import List, Optional, Tuple, Union

from .errors import ConfigError
from .utils import validators
from .utils.validators import DocimaSettings, ImageConfig, Overwrite

PathLike = Union[str, os.PathLike]


class ImageFile:
    """Builder for one generated image fragment.

    Required: path, width, height. Everything else is optional.
    """

    def __init__(self):
        self._path: Optional[PathLike] = None
        self._width: Optional[int] = None
        self._height: Optional[int] = None
        self._attributes: List[Tuple[str, str]] = []
        self._wrapper: Optional[str] = None
        self._wrapper_attributes: List[Tuple[str, str]] = []
        self._overwrite = Overwrite.UNSET
        self._root: Optional[PathLike] = None

    def path(self, path: PathLike) -> 'ImageFile':
        """Output file, absolute or relative to the project root."""
        self._path = path
        return self

    def width(self, width: int) -> 'ImageFile':
        self._width = width
        return self

    def height(self, height: int) -> 'ImageFile':
        self._height = height
        return self

    def attr(self, name: str, value: str) -> 'ImageFile':
        """Append an <img> attribute. Value is inserted unescaped."""
        self._attributes.append((name, value))
        return self

    def wrapper(self, tag: str) -> 'ImageFile':
        """Wrap the <img> in a `tag` element ("" removes the wrapper)."""
        self._wrapper = tag
        return self

    def wrapper_attr(self, name: str, value: str) -> 'ImageFile':
        """Append a wrapper attribute (e.g. href/target for an "a" wrapper)."""
        self._wrapper_attributes.append((name, value))
        return self

    def overwrite(self, overwrite: Optional[bool]) -> 'ImageFile':
        """Regenerate even if the file exists (True), keep it (False), or
        defer to settings.default_overwrite (None)."""
        self._overwrite = Overwrite.from_flag(overwrite)
        return self

    def root(self, root: Optional[PathLike]) -> 'ImageFile':
        """Base directory for a relative path instead of the project root."""
        self._root = root
        return self

    def build(self) -> ImageConfig:
        """Validate and freeze the configuration.

        Raises
        ------
        ConfigError
            Naming every missing or invalid field
        """
        try:
            return validators.validate_image_config({
                'path': self._path,
                'width': self._width,
                'height': self._height,
                'attributes': tuple(self._attributes),
                'wrapper': self._wrapper,
                'wrapper_attributes': tuple(self._wrapper_attributes),
                'overwrite': self._overwrite,
                'root': self._root,
            })
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def generate(self, generator, settings: Optional[DocimaSettings] = None):
        """Build the config and run it through an Orchestrator.

        Returns
        -------
        GenerationResult
        """
        from .orchestrator import Orchestrator

        config = self.build()
        return Orchestrator(settings).generate(config, generator)

    def __repr__(self) -> str:
        return (
            f"ImageFile(path={self._path!r}, width={self._width!r}, "
            f"height={self._height!r}, overwrite={self._overwrite.value})"
        )


def generate_image(
    generator,
    width: int,
    height: int,
    path: PathLike,
    alt: str = "",
    title: str = "",
    wrapper: str = "",
    settings: Optional[DocimaSettings] = None
):
    """One-call form for the common case of alt/title plus a wrapper.

    Empty `alt`/`title`/`wrapper` are left out of the fragment.
    """
    image = ImageFile().path(path).width(width).height(height).wrapper(wrapper)
    if alt:
        image.attr("alt", alt)
    if title:
        image.attr("title", title)
    return image.generate(generator, settings)
