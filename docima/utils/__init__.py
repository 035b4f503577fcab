"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config and settings validation (validators)
    - Atomic I/O and project root discovery (fs)
    - Hashing for provenance (hashing)
    - Unified logging (logging_config)
    - Stage timing (profiler)

No module in utils/ may import from upper layers (encoding, orchestrator, build).

Convenience imports:
    from docima.utils import fs, validators
    from docima.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import hashing
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, log_context, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'hashing',
    'logging_config',
    'profiler',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
    'log_context',
]
