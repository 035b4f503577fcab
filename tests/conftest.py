"""Shared fixtures: isolated settings and simple pixel generators."""

import numpy as np
import pytest

from docima.settings import ENV_OVERRIDES, SETTINGS_PATH_ENV, reset_settings
from docima.utils.validators import DocimaSettings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep the developer's environment out of settings resolution."""
    for var in (*ENV_OVERRIDES, SETTINGS_PATH_ENV, "DOCS_RS"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Default settings (overwrite enabled, no gating)."""
    return DocimaSettings()


def gradient_pixels(width: int, height: int) -> bytes:
    """Deterministic RGBA gradient of exactly width * height * 4 bytes."""
    y, x = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (x * 255 // max(width - 1, 1)).astype(np.uint8)
    pixels[..., 1] = (y * 255 // max(height - 1, 1)).astype(np.uint8)
    pixels[..., 2] = 128
    pixels[..., 3] = 200
    return pixels.tobytes()


class CountingGenerator:
    """Callable generator that records its calls."""

    def __init__(self, fn=gradient_pixels):
        self.fn = fn
        self.calls = []

    def __call__(self, width, height):
        self.calls.append((width, height))
        return self.fn(width, height)


@pytest.fixture
def counting_generator():
    return CountingGenerator()


@pytest.fixture
def gradient():
    """The gradient_pixels generator function."""
    return gradient_pixels
