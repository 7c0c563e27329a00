"""Device-agnostic drawing surface, palette and text metrics types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Sequence


def rgb565(r: int, g: int, b: int) -> int:
    """Pack 8-bit red, green and blue into a 16-bit RGB565 value."""
    return ((r & 0xF8) << 8) | ((g & 0xFC) << 3) | ((b & 0xFF) >> 3)


class Color(IntEnum):
    """The warm-beige palette used by every page."""

    BG = rgb565(0xEB, 0xE6, 0xDA)
    CARD = rgb565(0xF4, 0xF0, 0xE5)
    CARD_LINE = rgb565(0xD8, 0xD1, 0xBD)
    INK = rgb565(0x1F, 0x1E, 0x1B)
    INK2 = rgb565(0x40, 0x3D, 0x38)
    MUTE = rgb565(0x8A, 0x84, 0x7A)
    ACCENT = rgb565(0xD9, 0x77, 0x57)
    ACC_SOFT = rgb565(0xF2, 0xD5, 0xC0)
    GOOD = rgb565(0x3F, 0x7D, 0x62)
    WARN = rgb565(0xC2, 0x54, 0x50)
    HAIRLINE = rgb565(0xE2, 0xDD, 0xCE)


class Font(Enum):
    """Semantic font tiers; each device maps them to concrete fonts."""

    BIG_NUMBER = 0
    TITLE = 1
    BODY = 2
    LABEL = 3
    MONO = 4


class Align(Enum):
    """Text anchor point."""

    TOP_LEFT = 0
    TOP_RIGHT = 1
    MIDDLE_LEFT = 2
    MIDDLE_CENTER = 3
    MIDDLE_RIGHT = 4


@dataclass(frozen=True)
class RawFrame:
    """The raw pixels of the current frame, for screen capture."""

    data: bytes
    width: int
    height: int
    fmt: str


class Canvas(ABC):
    """A drawing surface; begin() and end() bracket one frame."""

    @abstractmethod
    def width(self) -> int: ...

    @abstractmethod
    def height(self) -> int: ...

    @abstractmethod
    def begin(self) -> None:
        """Start a frame."""

    @abstractmethod
    def end(self) -> None:
        """Flush the frame to the screen in one push."""

    @abstractmethod
    def fill_screen(self, c: int) -> None: ...

    @abstractmethod
    def fill_round_rect(self, x: int, y: int, w: int, h: int, r: int, c: int) -> None: ...

    @abstractmethod
    def draw_round_rect(self, x: int, y: int, w: int, h: int, r: int, c: int) -> None: ...

    @abstractmethod
    def fill_circle(self, x: int, y: int, r: int, c: int) -> None: ...

    @abstractmethod
    def draw_circle(self, x: int, y: int, r: int, c: int) -> None: ...

    @abstractmethod
    def draw_hline(self, x: int, y: int, w: int, c: int) -> None: ...

    @abstractmethod
    def micro_bar(self, x: int, y: int, w: int, h: int, pct: int, fg: int) -> None:
        """Draw a rounded progress bar; `pct` is clamped to 0..100."""

    @abstractmethod
    def sparkline(
        self, x: int, y: int, w: int, h: int, values: Sequence[float], c: int
    ) -> None:
        """Draw a polyline of `values` normalised into the given box."""

    @abstractmethod
    def text(
        self, s: Optional[str], x: int, y: int, font: Font, align: Align, fg: int
    ) -> None: ...

    @abstractmethod
    def measure_text(self, s: Optional[str], font: Font) -> int: ...

    def raw_frame(self) -> Optional[RawFrame]:
        """Return the current frame's pixels, or None if capture is unsupported."""
        return None