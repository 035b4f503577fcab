#!/usr/bin/env python3
"""Build the example documentation images.

Generates two HTML fragments under images/ for inclusion in the docs:
    - plotters-histogram.html: a matplotlib histogram in a styled <div>
    - square-random-pixels.html: 32x32 seeded random pixels inside a link

Run before the documentation build:
    python scripts/build_images.py
    python scripts/build_images.py --log_level DEBUG --settings ci/docima.yaml

Set DOCS_RS (or any skip_env variable) to skip generation entirely.
"""

import argparse
import sys

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from docima import DocimaError, ImageFile
from docima.build import run_build
from docima.settings import load_settings
from docima.utils import logging_config

HISTOGRAM_DATA = [0, 1, 1, 1, 4, 2, 5, 7, 8, 6, 4, 2, 1, 8, 3, 3, 3, 4, 4, 3, 3, 3]


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate the example documentation images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--settings',
        type=str,
        default=None,
        help='Settings YAML, default: <project root>/docima.yaml if present'
    )
    parser.add_argument(
        '--log_level',
        type=str,
        default=None,
        help='Log level, default: settings.log_level'
    )
    return parser.parse_args()


def plot_histogram(width: int, height: int) -> np.ndarray:
    """Render a bucket histogram to an RGBA buffer of the requested size."""
    dpi = 100
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    try:
        ax = fig.add_subplot(1, 1, 1)
        ax.hist(HISTOGRAM_DATA, bins=range(11), color=(1.0, 0.0, 0.0, 0.5), rwidth=0.9)
        ax.set_title("Histogram Test")
        ax.set_xlabel("Bucket")
        ax.set_ylabel("Count")
        ax.set_xlim(0, 10)
        ax.set_ylim(0, 10)
        ax.grid(axis="y", color="white", alpha=0.3)
        fig.canvas.draw()
        return np.array(fig.canvas.buffer_rgba(), dtype=np.uint8)
    finally:
        plt.close(fig)


def random_pixels(width: int, height: int) -> bytes:
    """Seeded random opaque pixels so the image is stable across builds."""
    rng = np.random.default_rng(1234)
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    pixels[..., 3] = 255
    return pixels.tobytes()


def main():
    """Main entry point."""
    args = parse_args()

    try:
        settings = load_settings(args.settings)
    except DocimaError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logging_config.setup_logging(
        log_level=args.log_level or settings.log_level,
        quiet_libs=["matplotlib", "PIL"],
        context={"app": "build_images"},
    )
    logging_config.install_excepthook()

    histogram = (
        ImageFile()
        .path("images/plotters-histogram.html")
        .width(400)
        .height(300)
        .attr("title", "an example histogram")
        .attr("style", "display: block; margin: auto;")
        .wrapper("div")
        .wrapper_attr(
            "style",
            "padding: 10px; max-width: 430px; margin: auto; "
            "background-color: rgba(225,225,225,0.5); "
            "border: 4px solid rgba(200,200,200,0.3); border-radius: 4px;"
        )
    )

    square = (
        ImageFile()
        .path("images/square-random-pixels.html")
        .width(32)
        .height(32)
        .attr("title", "random pixels linking to 'python.org'")
        .attr("alt", "A 32x32 square filled with random color pixels.")
        .attr("style", "vertical-align: middle; margin: 8px 0; padding: 2px; background: #22f4cd;")
        .wrapper("a")
        .wrapper_attr("href", "https://www.python.org/")
        .wrapper_attr("target", "_blank")
    )

    try:
        run_build([(histogram, plot_histogram), (square, random_pixels)], settings)
    except DocimaError:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
