"""Base64 encoding, whole or streamed in bounded pieces."""

from __future__ import annotations

import base64
from typing import Callable

# 3072 input bytes become exactly 4096 output characters.
_CHUNK_BYTES = 3072


def base64_encode(data: bytes) -> str:
    """Standard base64 with '=' padding; the result is safe inside JSON strings."""
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_encode_stream(data: bytes, write: Callable[[str], object]) -> None:
    """Encode `data`, handing the output to `write` in pieces of at most 4096 chars."""
    view = memoryview(bytes(data))
    for start in range(0, len(view), _CHUNK_BYTES):
        write(base64.b64encode(view[start : start + _CHUNK_BYTES]).decode("ascii"))