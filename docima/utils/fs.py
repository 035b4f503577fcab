"""Atomic filesystem operations for generated fragments and YAML settings.

Provides:
    - Atomic writes: unique tmp file → fsync → rename (prevents partial reads)
    - YAML load for the settings file
    - Directory creation with exist_ok semantics
    - Project root discovery for resolving relative output paths

Critical for build steps:
    - A fragment file is either absent, the previous version, or complete
    - The downstream documentation renderer never sees a half-written file

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from docima.utils import fs
    fs.atomic_write_text("images/plot.html", fragment)
    root = fs.find_project_root()
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml


# Files whose presence marks a directory as a Python project root
PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg")


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)

    Notes
    -----
    Creates parent directories as needed.
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    OSError
        If the parent directory can't be created or the write/rename fails.
        The temporary file is removed and the target is left untouched.

    Notes
    -----
    Uses same directory for tmp file to ensure atomic rename on same filesystem.
    """
    path = Path(path)
    try:
        ensure_dir(path.parent)
    except OSError as e:
        raise OSError(f"Failed to create directory {path.parent}: {e}") from e

    tmp_path = None
    try:
        # Unique tmp name per writer: concurrent writers never share a file
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=path.name + ".", suffix=tmp_suffix
        )
        tmp_path = Path(tmp_name)
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600; fragments are ordinary build outputs
        os.chmod(tmp_path, 0o644)

        # Atomic rename (overwrites existing file on POSIX and Windows)
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise OSError(f"Failed to write {path} atomically: {e}") from e


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8"
) -> None:
    """Write text to file atomically.

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    text : str
        Text content
    encoding : str
        Text encoding, default "utf-8"

    Notes
    -----
    Convenience wrapper around atomic_write_bytes.
    """
    atomic_write_bytes(path, text.encode(encoding))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content (empty dict for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def find_project_root(
    start: Optional[Union[str, Path]] = None,
    markers: Iterable[str] = PROJECT_MARKERS
) -> Optional[Path]:
    """Find the nearest ancestor directory holding a project marker file.

    Parameters
    ----------
    start : Union[str, Path], optional
        Directory to start from, default current working directory
    markers : Iterable[str]
        File names that mark a project root

    Returns
    -------
    Optional[Path]
        Project root, or None if no ancestor holds a marker
    """
    start = Path(start) if start is not None else Path.cwd()
    markers = tuple(markers)
    for candidate in (start, *start.parents):
        if any((candidate / m).is_file() for m in markers):
            return candidate
    return None


def resolve_output_path(
    path: Union[str, Path],
    root: Optional[Union[str, Path]] = None
) -> Path:
    """Resolve an output path against an explicit root or the project root.

    Parameters
    ----------
    path : Union[str, Path]
        Absolute path, or path relative to the project
    root : Union[str, Path], optional
        Explicit base directory; takes precedence over project discovery

    Returns
    -------
    Path
        Absolute path. Falls back to the current directory when no project
        root is found.
    """
    path = Path(path)
    if path.is_absolute():
        return path
    if root is not None:
        return Path(root) / path
    base = find_project_root() or Path.cwd()
    return base / path

