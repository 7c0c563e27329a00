"""Device identifier formatting."""

from __future__ import annotations

from typing import Optional

_DEFAULT_PREFIX = "M5CT"
_MAX_LEN = 23


def format_device_id(prefix: Optional[str], suffix: int) -> str:
    """Return "<prefix>-<low 24 bits of suffix as 6 upper-case hex digits>"."""
    text = f"{prefix if prefix is not None else _DEFAULT_PREFIX}-{suffix & 0xFFFFFF:06X}"
    return text[:_MAX_LEN]