"""Newline-delimited JSON line framing."""

from __future__ import annotations

from typing import List, Union

_Bytes = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: _Bytes) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class NdjsonFramer:
    """Collect byte chunks into complete lines.

    Empty lines are skipped. A line of `max_len` bytes or more is dropped
    whole, and framing resumes after its terminating newline.
    """

    def __init__(self, max_len: int = 3072) -> None:
        self._max_len = max_len
        self._buf = bytearray()
        self._overflow = False

    def push(self, data: _Bytes) -> List[bytes]:
        """Feed a chunk; return the lines it completed, without newlines."""
        lines: List[bytes] = []
        *complete, tail = _as_bytes(data).split(b"\n")
        for segment in complete:
            self._append(segment)
            if self._overflow:
                self._overflow = False
            elif self._buf:
                lines.append(bytes(self._buf))
            self._buf.clear()
        self._append(tail)
        return lines

    def _append(self, segment: bytes) -> None:
        if self._overflow or not segment:
            return
        if len(self._buf) + len(segment) > self._max_len - 1:
            self._overflow = True
            self._buf.clear()
            return
        self._buf += segment

    @staticmethod
    def frame(line: _Bytes) -> bytes:
        """Return `line` terminated by a newline, ready to send."""
        return _as_bytes(line) + b"\n"