"""A canvas that records drawing calls instead of drawing them."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .canvas import Align, Canvas, Font, RawFrame

_CANNED_FRAME = bytes([0x12, 0x34, 0x56, 0x78, 0x9A, 0xBC, 0xDE, 0xF0])
_CHAR_WIDTH = 6


class RecordingCanvas(Canvas):
    """Records each primitive as "<prim>" or "<prim>:<arg>" in `calls`.

    The surface is 320x240; text measures 6 px per character and
    raw_frame() returns a fixed 2x2 RGB565 frame.
    """

    def __init__(self) -> None:
        self.calls: List[str] = []

    def width(self) -> int:
        return 320

    def height(self) -> int:
        return 240

    def begin(self) -> None:
        self.calls.append("begin")

    def end(self) -> None:
        self.calls.append("end")

    def fill_screen(self, c: int) -> None:
        self.calls.append("fill_screen")

    def fill_round_rect(self, x: int, y: int, w: int, h: int, r: int, c: int) -> None:
        self.calls.append("fill_round_rect")

    def draw_round_rect(self, x: int, y: int, w: int, h: int, r: int, c: int) -> None:
        self.calls.append("draw_round_rect")

    def fill_circle(self, x: int, y: int, r: int, c: int) -> None:
        self.calls.append("fill_circle")

    def draw_circle(self, x: int, y: int, r: int, c: int) -> None:
        self.calls.append("draw_circle")

    def draw_hline(self, x: int, y: int, w: int, c: int) -> None:
        self.calls.append("draw_hline")

    def micro_bar(self, x: int, y: int, w: int, h: int, pct: int, fg: int) -> None:
        self.calls.append(f"micro_bar:{pct}")

    def sparkline(
        self, x: int, y: int, w: int, h: int, values: Sequence[float], c: int
    ) -> None:
        self.calls.append(f"sparkline:{len(values)}")

    def text(
        self, s: Optional[str], x: int, y: int, font: Font, align: Align, fg: int
    ) -> None:
        self.calls.append(f"text:{s or ''}")

    def measure_text(self, s: Optional[str], font: Font) -> int:
        return len(s or "") * _CHAR_WIDTH

    def raw_frame(self) -> Optional[RawFrame]:
        self.calls.append("raw_frame")
        return RawFrame(data=_CANNED_FRAME, width=2, height=2, fmt="rgb565")

    def called(self, prim: str, arg: Optional[str]) -> bool:
        """True if "<prim>:<arg>" was recorded exactly."""
        return f"{prim}:{arg or ''}" in self.calls

    def _matches(self, call: str, prim: str) -> bool:
        return call == prim or call.startswith(prim + ":")

    def called_prefix(self, prim: str) -> bool:
        """True if `prim` was recorded, bare or with an argument."""
        return any(self._matches(call, prim) for call in self.calls)

    def count_prefix(self, prim: str) -> int:
        """How many times `prim` was recorded, bare or with an argument."""
        return sum(1 for call in self.calls if self._matches(call, prim))