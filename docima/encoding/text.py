"""Standard base64 text encoding for inline embedding.

RFC 4648 alphabet (A-Z a-z 0-9 + /), '=' padding, no line breaks.
decode(encode(b)) == b for every byte string, including b"".
"""

import base64
import binascii

from ..errors import EncodingError


def encode(data: bytes) -> str:
    """Encode bytes as a single-line base64 string."""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode(text: str) -> bytes:
    """Decode a base64 string, rejecting characters outside the alphabet.

    Raises
    ------
    EncodingError
        If the text is not valid base64
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 text: {e}") from e
