"""SHA-256 hashing for raster and fragment provenance.

Provides:
    - sha256_bytes(): Hash an in-memory byte string (encoded PNG data)
    - sha256_file(): Hash file contents (generated fragments)
    - sha256_string(): Hash a text string

Used for:
    - Logging the digest of every encoded raster, so repeated builds can be
      compared from their logs alone
    - Checking that regeneration is reproducible (same inputs → same file)

Deterministic hashing:
    - Files read in chunks (1 MB default) for memory efficiency
    - Results are hex strings (64 chars)

Usage:
    from docima.utils import hashing
    digest = hashing.sha256_file("images/plot.html")

Note: Module named `hashing.py` to avoid shadowing builtin `hash()`.
"""

import hashlib
from pathlib import Path
from typing import Union


def sha256_bytes(data: bytes) -> str:
    """Compute SHA-256 hash of a byte string.

    Parameters
    ----------
    data : bytes
        Bytes to hash

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)
    """
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 hash of file contents.

    Parameters
    ----------
    path : Union[str, Path]
        File path
    chunk_size : int
        Read chunk size in bytes, default 1 MB

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist

    Examples
    --------
    >>> before = sha256_file("images/plot.html")
    >>> # ... regenerate ...
    >>> assert sha256_file("images/plot.html") == before
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256 = hashlib.sha256()

    with open(path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            sha256.update(chunk)

    return sha256.hexdigest()


def sha256_string(s: str) -> str:
    """Compute SHA-256 hash of string (UTF-8 encoded)."""
    return sha256_bytes(s.encode('utf-8'))
