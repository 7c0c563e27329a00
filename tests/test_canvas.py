from typing import Optional, Sequence

import pytest

from statusdeck.canvas import Align, Canvas, Color, Font, RawFrame, rgb565


class _PlainCanvas(Canvas):
    def __init__(self) -> None:
        self.log = []

    def width(self) -> int:
        return 10

    def height(self) -> int:
        return 5

    def begin(self) -> None:
        self.log.append("begin")

    def end(self) -> None:
        self.log.append("end")

    def fill_screen(self, c: int) -> None:
        self.log.append(("fill_screen", c))

    def fill_round_rect(self, x, y, w, h, r, c) -> None:
        self.log.append("fill_round_rect")

    def draw_round_rect(self, x, y, w, h, r, c) -> None:
        self.log.append("draw_round_rect")

    def fill_circle(self, x, y, r, c) -> None:
        self.log.append("fill_circle")

    def draw_circle(self, x, y, r, c) -> None:
        self.log.append("draw_circle")

    def draw_hline(self, x, y, w, c) -> None:
        self.log.append("draw_hline")

    def micro_bar(self, x, y, w, h, pct, fg) -> None:
        self.log.append("micro_bar")

    def sparkline(self, x, y, w, h, values: Sequence[float], c) -> None:
        self.log.append("sparkline")

    def text(self, s: Optional[str], x, y, font, align, fg) -> None:
        self.log.append(("text", s))

    def measure_text(self, s: Optional[str], font) -> int:
        return len(s or "")


def test_rgb565_black_and_white_extremes():
    assert rgb565(0, 0, 0) == 0
    assert rgb565(0xFF, 0xFF, 0xFF) == 0xFFFF


def test_rgb565_pure_red():
    assert rgb565(0xFF, 0, 0) == 0xF800


def test_rgb565_drops_low_bits():
    assert rgb565(0x07, 0x03, 0x07) == rgb565(0, 0, 0)
    assert rgb565(0xF8, 0xFC, 0xF8) == rgb565(0xFF, 0xFF, 0xFF)


def test_rgb565_fits_in_sixteen_bits():
    for r, g, b in [(1, 2, 3), (200, 100, 50), (0xEB, 0xE6, 0xDA)]:
        assert 0 <= rgb565(r, g, b) <= 0xFFFF


def test_palette_entries_are_packed_from_source_rgb():
    assert Color.BG == rgb565(0xEB, 0xE6, 0xDA)
    assert Color.ACCENT == rgb565(0xD9, 0x77, 0x57)
    assert Color.HAIRLINE == rgb565(0xE2, 0xDD, 0xCE)


def test_palette_values_usable_as_ints():
    canvas = _PlainCanvas()
    canvas.fill_screen(Color.BG)
    assert canvas.log == [("fill_screen", rgb565(0xEB, 0xE6, 0xDA))]


def test_canvas_is_abstract():
    with pytest.raises(TypeError):
        Canvas()


def test_default_raw_frame_is_unsupported():
    assert Canvas.raw_frame(_PlainCanvas()) is None


def test_subclass_draws_text_through_interface():
    canvas = _PlainCanvas()
    canvas.text("hi", 1, 2, Font.LABEL, Align.TOP_LEFT, Color.INK)
    canvas.fill_screen(rgb565(0x1F, 0x1E, 0x1B))
    assert canvas.log == [("text", "hi"), ("fill_screen", Color.INK)]
    assert canvas.measure_text("abc", Font.BODY) == 3


def test_raw_frame_is_immutable():
    frame = RawFrame(b"\x00\x01", 1, 1, "rgb565")
    with pytest.raises(AttributeError):
        frame.width = 2
    assert frame.data == b"\x00\x01"