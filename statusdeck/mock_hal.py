"""In-memory peripherals for running the app without hardware."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple, Union

from .hal import Board, Display, IconId, Input, InputEvent, Power, Transport


@dataclass(frozen=True)
class FillRectCall:
    x: int
    y: int
    w: int
    h: int
    rgb: int


@dataclass(frozen=True)
class DrawTextCall:
    x: int
    y: int
    text: str
    size: int


class MockDisplay(Display):
    """A 320x240 display that records what is drawn on it."""

    def __init__(self) -> None:
        self.last_text = ""
        self.texts: List[DrawTextCall] = []
        self.rects: List[FillRectCall] = []
        self.icons: List[Tuple[int, int, IconId]] = []
        self.cleared_count = 0
        self.push_count = 0
        self.brightness = 100

    def clear(self) -> None:
        self.last_text = ""
        self.texts.clear()
        self.rects.clear()
        self.icons.clear()
        self.cleared_count += 1

    def draw_text(self, x: int, y: int, text: str, size: int) -> None:
        self.last_text = text
        self.texts.append(DrawTextCall(x, y, text, size))

    def draw_icon(self, x: int, y: int, icon: IconId) -> None:
        self.icons.append((x, y, IconId(icon)))

    def fill_rect(self, x: int, y: int, w: int, h: int, rgb: int) -> None:
        self.rects.append(FillRectCall(x, y, w, h, rgb))

    def push(self) -> None:
        self.push_count += 1

    def set_brightness(self, pct: int) -> None:
        self.brightness = max(0, min(100, pct))

    def width(self) -> int:
        return 320

    def height(self) -> int:
        return 240

    def contains_text(self, needle: str) -> bool:
        """True if any drawn text contains `needle`."""
        return any(needle in call.text for call in self.texts)

    def reset(self) -> None:
        self.last_text = ""
        self.texts.clear()
        self.rects.clear()
        self.icons.clear()
        self.cleared_count = 0
        self.push_count = 0


class MockInput(Input):
    """A touch input that replays fed events in order."""

    def __init__(self) -> None:
        self._events: Deque[InputEvent] = deque()

    def poll(self) -> Optional[InputEvent]:
        return self._events.popleft() if self._events else None

    def feed(self, event: InputEvent) -> None:
        self._events.append(event)

    def has_keyboard(self) -> bool:
        return False

    def has_touch(self) -> bool:
        return True


class MockPower(Power):
    """A full, charging battery."""

    def battery_pct(self) -> int:
        return 100

    def charging(self) -> bool:
        return True


class MockTransport(Transport):
    """A loopback-free transport: tests feed its input and drain its output."""

    def __init__(self) -> None:
        self._rx = bytearray()
        self._tx = bytearray()
        self._connected = True

    def begin(self) -> bool:
        return True

    def connected(self) -> bool:
        return self._connected

    def set_connected(self, value: bool) -> None:
        self._connected = value

    def read(self, n: int) -> bytes:
        out = bytes(self._rx[:n])
        del self._rx[: len(out)]
        return out

    def write(self, data: bytes) -> int:
        self._tx += data
        return len(data)

    def feed(self, text: Union[str, bytes]) -> None:
        """Queue bytes for the device to read."""
        self._rx += text.encode("utf-8") if isinstance(text, str) else bytes(text)

    def drain_tx(self) -> str:
        """Return and forget everything written so far."""
        out = self._tx.decode("utf-8", errors="replace")
        self._tx.clear()
        return out


def create_mock_board() -> Board:
    """Return a board wired to fresh mock peripherals."""
    return Board(
        display=MockDisplay(),
        input=MockInput(),
        power=MockPower(),
        transport=MockTransport(),
        name="mock",
        fw_ver="0.0.0",
        device_id="MOCK-000001",
    )