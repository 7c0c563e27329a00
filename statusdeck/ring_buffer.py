"""Fixed-capacity FIFO of bytes that drops new data when full."""

from __future__ import annotations


class ByteRingBuffer:
    """A bounded byte queue; writes beyond capacity are discarded."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._buf = bytearray()

    @property
    def capacity(self) -> int:
        return self._capacity

    def write(self, data: bytes) -> int:
        """Append as much of `data` as fits; return how many bytes were kept."""
        room = self._capacity - len(self._buf)
        taken = bytes(data[:room])
        self._buf += taken
        return len(taken)

    def read(self, n: int) -> bytes:
        """Remove and return up to `n` bytes, oldest first."""
        out = bytes(self._buf[:n])
        del self._buf[: len(out)]
        return out

    def available(self) -> int:
        return len(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def clear(self) -> None:
        self._buf.clear()