"""Build-step glue: decide whether to generate, then run a batch of images.

The generation core never looks at the gating toggle; a build script calls
should_build() (or run_build(), which calls it) before generating.

Gating rules:
    - Any variable in settings.skip_env is set, even empty (e.g. DOCS_RS) → skip
    - settings.build_when_doc and not settings.doc → skip

Usage::

    from docima.build import run_build

    run_build([
        (ImageFile().path("images/a.html").width(32).height(32), random_pixels),
        (ImageFile().path("images/b.html").width(400).height(300), plot_histogram),
    ])
"""

from __future__ import annotations

import os
from typing import Iterable, List, Mapping, Optional, Tuple

from .config import ImageFile
from .errors import DocimaError
from .orchestrator import GenerationResult, GeneratorLike, Orchestrator
from .utils.logging_config import get_logger
from .utils.validators import DocimaSettings

logger = get_logger(__name__)

Job = Tuple[ImageFile, GeneratorLike]


def should_build(
    settings: DocimaSettings,
    env: Optional[Mapping[str, str]] = None
) -> bool:
    """Apply the gating toggle and skip-environment rules."""
    env = os.environ if env is None else env

    for var in settings.skip_env:
        if var in env:
            logger.info("Not building images: %s is set", var)
            return False

    if settings.build_when_doc and not settings.doc:
        logger.info("Not building images: build_when_doc is set but doc is not")
        return False

    return True


def run_build(
    jobs: Iterable[Job],
    settings: Optional[DocimaSettings] = None,
    env: Optional[Mapping[str, str]] = None
) -> List[GenerationResult]:
    """Generate every job in order, stopping at the first failure.

    Parameters
    ----------
    jobs : Iterable[Job]
        (ImageFile, generator) pairs
    settings : DocimaSettings, optional
        Defaults to docima.settings.get_settings()
    env : Mapping[str, str], optional
        Environment for the gating check, default os.environ

    Returns
    -------
    List[GenerationResult]
        One result per job; empty if the build is gated off

    Raises
    ------
    DocimaError
        The first failure, after logging it; the build should abort
    """
    orchestrator = Orchestrator(settings)
    if not should_build(orchestrator.settings, env):
        return []

    results = []
    for image, generator in jobs:
        try:
            results.append(orchestrator.generate(image.build(), generator))
        except DocimaError as e:
            logger.error("Image generation failed for %r: %s", image, e)
            raise

    written = sum(r.written for r in results)
    logger.info("Images: %d written, %d kept", written, len(results) - written)
    return results
