"""Logging setup for build scripts and the generation pipeline.

Build scripts call setup_logging() once; library modules only ever call
get_logger(__name__) and never add handlers themselves.

Every record is tagged with the contextual fields of the calling context
(a contextvar, so threads and tasks each see their own). The orchestrator
sets `image=<path>` for the duration of a generate() call; scripts usually
add `app=<script name>`.

Output:
    console (stderr), human:
        2026-10-19T13:45:12.345Z | INFO     | app=build image=images/a.html | Wrote ...
    optional log file, one JSON object per line for CI log collectors:
        {"t": "2026-10-19T13:45:12.345000+00:00", "lvl": "INFO",
         "name": "docima.orchestrator", "app": "build", "image": "images/a.html",
         "msg": "Wrote ..."}

Usage:
    from docima.utils import logging_config
    logging_config.setup_logging("DEBUG", "build/logs/images.jsonl", context={"app": "build"})
    logger = logging_config.get_logger(__name__)
    with logging_config.log_context(image="images/a.html"):
        logger.info("Encoding")
"""

import contextvars
import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

_fields: contextvars.ContextVar = contextvars.ContextVar('docima_log_fields', default={})

# Handlers owned by setup_logging; replaced, never duplicated, on a second call
_installed_handlers: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Formats records as a human line or a JSON object, with context fields.

    Timestamps are always UTC.
    """

    def __init__(self, fmt_mode: str = "human"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        fields = _fields.get()
        if self.fmt_mode == "json":
            entry = {'t': ts.isoformat(), 'lvl': record.levelname, 'name': record.name}
            entry.update(fields)
            entry['msg'] = record.getMessage()
            if record.exc_info:
                entry['exc'] = self.formatException(record.exc_info)
            return json.dumps(entry, default=str)

        stamp = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'
        parts = [stamp, f"{record.levelname:8s}"]
        if fields:
            parts.append(' '.join(f"{k}={v}" for k, v in fields.items()))
        parts.append(record.getMessage())
        line = ' | '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    to_stderr: bool = True,
    capture_warnings: bool = True,
    quiet_libs: Optional[Iterable[str]] = None,
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Configure the root logger for a build script (idempotent).

    Parameters
    ----------
    log_level : str
        Level name, case-insensitive ("DEBUG", "info", ...)
    log_file : str, optional
        JSON-lines log file; parent directories are created
    to_stderr : bool
        Human-readable console output on stderr, default True
    capture_warnings : bool
        Route warnings.warn() through logging, default True
    quiet_libs : Iterable[str], optional
        Loggers capped at WARNING (e.g. ["matplotlib", "PIL"])
    context : dict, optional
        Fields added to every subsequent record

    Returns
    -------
    dict
        {"handlers": [...]} as installed

    Raises
    ------
    ValueError
        If log_level is not a logging level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human"))
        _installed_handlers.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(ContextFormatter("json"))
        _installed_handlers.append(file_handler)

    root.setLevel(level)
    for handler in _installed_handlers:
        root.addHandler(handler)

    for lib in quiet_libs or ():
        logging.getLogger(lib).setLevel(logging.WARNING)

    if context:
        push_context(**context)

    logging.captureWarnings(capture_warnings)

    return {'handlers': list(_installed_handlers)}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def push_context(**kwargs) -> None:
    """Add fields to every later record of the current context."""
    _fields.set({**_fields.get(), **kwargs})


def pop_context(keys: Optional[Iterable[str]] = None) -> None:
    """Remove the given fields, or all of them when keys is None."""
    if keys is None:
        _fields.set({})
        return
    remaining = dict(_fields.get())
    for key in keys:
        remaining.pop(key, None)
    _fields.set(remaining)


def get_context() -> Dict[str, Any]:
    return dict(_fields.get())


@contextmanager
def log_context(**kwargs):
    """Fields for the duration of a block; the previous fields come back on exit."""
    token = _fields.set({**_fields.get(), **kwargs})
    try:
        yield
    finally:
        _fields.reset(token)


def install_excepthook() -> None:
    """Log uncaught exceptions (except Ctrl-C) at CRITICAL before the script dies."""
    def log_uncaught(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("docima").critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_uncaught
