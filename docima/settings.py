"""Process-wide settings loader.

Settings are read once per process and passed to every Orchestrator that
isn't given its own. Sources, lowest precedence first:

    1. DocimaSettings defaults (overwrite existing fragments, no gating)
    2. docima.yaml in the project root, or the file named by DOCIMA_SETTINGS
    3. Environment variables:
         DOCIMA_DEFAULT_OVERWRITE   true/false
         DOCIMA_BUILD_WHEN_DOC      true/false
         DOCIMA_DOC                 true/false
         DOCIMA_LOG_LEVEL           DEBUG/INFO/...

Example docima.yaml::

    schema: docima.v1
    default_overwrite: false
    build_when_doc: true

Usage::

    from docima.settings import get_settings
    settings = get_settings()                    # cached
    settings = load_settings("ci/docima.yaml")   # explicit, uncached
"""

from __future__ import annotations

import functools
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from .errors import ConfigError
from .utils import fs, validators
from .utils.logging_config import get_logger
from .utils.validators import DocimaSettings

logger = get_logger(__name__)

SETTINGS_FILENAME = "docima.yaml"
SETTINGS_PATH_ENV = "DOCIMA_SETTINGS"

ENV_OVERRIDES = {
    "DOCIMA_DEFAULT_OVERWRITE": "default_overwrite",
    "DOCIMA_BUILD_WHEN_DOC": "build_when_doc",
    "DOCIMA_DOC": "doc",
    "DOCIMA_LOG_LEVEL": "log_level",
}


def _default_settings_path(env: Mapping[str, str]) -> Optional[Path]:
    if env.get(SETTINGS_PATH_ENV):
        return Path(env[SETTINGS_PATH_ENV])
    root = fs.find_project_root()
    if root is not None and (root / SETTINGS_FILENAME).is_file():
        return root / SETTINGS_FILENAME
    return None


def load_settings(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None
) -> DocimaSettings:
    """Load settings from YAML and environment overrides (uncached).

    Parameters
    ----------
    path : Union[str, Path], optional
        Settings file; default is DOCIMA_SETTINGS or <project root>/docima.yaml
        when present
    env : Mapping[str, str], optional
        Environment to read overrides from, default os.environ

    Returns
    -------
    DocimaSettings
        Validated, frozen settings

    Raises
    ------
    ConfigError
        If the file is missing (explicit path only), malformed, or any value
        fails validation
    """
    env = os.environ if env is None else env
    if path is None:
        path = _default_settings_path(env)

    data = {}
    if path is not None:
        try:
            data = validators.load_settings_file(path).model_dump()
        except (FileNotFoundError, ValueError) as e:
            raise ConfigError(str(e)) from e
        logger.debug("Loaded settings from %s", path)

    overrides = {field: env[var] for var, field in ENV_OVERRIDES.items() if var in env}
    if overrides:
        logger.debug("Settings overridden from environment: %s", sorted(overrides))

    try:
        return validators.validate_settings({**data, **overrides})
    except ValueError as e:
        raise ConfigError(str(e)) from e


@functools.lru_cache(maxsize=None)
def get_settings() -> DocimaSettings:
    """Process-wide settings, loaded on first use."""
    return load_settings()


def reset_settings() -> None:
    """Forget cached settings (next get_settings() reloads)."""
    get_settings.cache_clear()
