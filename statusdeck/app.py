"""The device loop: transport draining, handshake replies, paging and redraw."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Union

from .b64stream import base64_encode_stream
from .canvas import Canvas
from .codec import (
    DecodeError,
    EncodeError,
    Kind,
    decode,
    encode_focus_event_session,
    encode_hello_ack,
    encode_pong,
    encode_screenshot_ack,
    encode_tap_ack,
)
from .hal import Board, InputKind, TransportUiStatus
from .ndjson import NdjsonFramer
from .pages import (
    PAGE_COUNT,
    SESSION_NEXT_X1,
    SESSION_NEXT_X2,
    SESSION_NEXT_Y1,
    SESSION_NEXT_Y2,
    SESSION_ROW_GAP,
    SESSION_ROW_H,
    SESSION_ROW_W,
    SESSION_ROW_X,
    SESSION_ROW_Y,
    PageId,
    badge_brightness_for,
    has_sessions_page,
    render_page,
    render_waiting,
    session_page_count_for,
)
from .status_model import (
    SESSION_ROWS_PER_PAGE,
    DeviceInfo,
    StatusModel,
    parse_status_frame,
)
from .time_util import local_from_utc

log = logging.getLogger(__name__)

# Capabilities announced in hello.ack: a display with touch.
CAPS = ("display", "touch")

# No inbound frame (pings included) for this long means the link is dead.
LINK_TIMEOUT_MS = 15000
BLE_PAIRING_TIMEOUT_MS = 5 * 60 * 1000
ANIMATION_INTERVAL_MS = 120
READ_CHUNK = 256

_U32 = 0xFFFFFFFF
_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1


class LinkState(Enum):
    """How alive the host link is."""

    NO_LINK = 0
    LINKED = 1
    LIVE = 2


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000) & _U32


def _elapsed(now: int, since: int) -> int:
    """Milliseconds from `since` to `now` on a wrapping 32-bit clock."""
    return (now - since) & _U32


def _is_int(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and _INT_MIN <= value <= _INT_MAX
    )


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    return 0


class App:
    """Runs the device: handles host frames and touch, and redraws when dirty."""

    def __init__(
        self,
        canvas: Canvas,
        board: Optional[Board],
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._canvas = canvas
        self._board = board
        self._clock = clock if clock is not None else _monotonic_ms
        self._framer = NdjsonFramer()
        self._model = StatusModel()
        self._dev = DeviceInfo()
        self._page = PageId.OVERVIEW
        self._link = LinkState.NO_LINK
        self._last_rx_ms = 0
        self._last_anim_ms = 0
        self._pairing_started_ms = 0
        self._offset_min = 0  # minutes east of UTC, from the last hello
        self._utc_base: Optional[tuple] = None  # (utc_ms, clock ms at sync)
        self._dirty = True

    @property
    def link(self) -> LinkState:
        return self._link

    @property
    def page(self) -> PageId:
        return self._page

    @property
    def session_page_index(self) -> int:
        return self._model.session_page_index

    @property
    def model(self) -> StatusModel:
        return self._model

    @property
    def device(self) -> DeviceInfo:
        return self._dev

    def _now(self) -> int:
        return self._clock() & _U32

    def boot(self) -> None:
        """Start the transport and draw the first waiting screen."""
        board = self._board
        if board is not None and board.transport is not None:
            board.transport.begin()
        self._refresh_device_info()
        self._link = LinkState.NO_LINK
        self._dirty = True
        self._render()
        log.debug("boot done; transport=%d", int(bool(board and board.transport)))

    def tick(self) -> None:
        """One loop pass: input, link checks, transport drain, redraw if dirty."""
        board = self._board
        if board is None:
            return
        self._poll_input()
        self._check_link()
        self._check_pairing_timeout()

        if (
            self._link is LinkState.LIVE
            and _elapsed(self._now(), self._last_anim_ms) >= ANIMATION_INTERVAL_MS
        ):
            self._last_anim_ms = self._now()
            brightness = badge_brightness_for(self._model.activity, self._now())
            if brightness != self._model.badge_brightness:
                self._model.badge_brightness = brightness
                self._dirty = True

        if board.transport is not None:
            data = board.transport.read(READ_CHUNK)
            if data:
                log.debug("rx n=%d", len(data))
                for line in self._framer.push(data):
                    self.handle_line(line)
        self._render()

    def handle_line(self, line: Union[str, bytes, bytearray]) -> None:
        """Handle one complete envelope line (without its newline)."""
        try:
            env = decode(line)
        except DecodeError as exc:
            log.debug("decode failed: %s", exc.result)
            return

        # Any decoded frame proves the host link is alive.
        self._last_rx_ms = self._now()
        if self._link is LinkState.NO_LINK:
            self._link = LinkState.LINKED
            self._dirty = True

        handlers = {
            Kind.HELLO.value: self._on_hello,
            Kind.PING.value: self._on_ping,
            Kind.SCREENSHOT.value: self._on_screenshot,
            Kind.TAP.value: self._on_tap,
            Kind.STATUS.value: self._on_status,
        }
        handler = handlers.get(env.kind)
        if handler is not None:
            handler(env)
        # Other kinds (notify and the like) are ignored.

    def _on_hello(self, env: Any) -> None:
        time_sync = env.payload.get("time")
        if isinstance(time_sync, dict) and time_sync.get("utc_ms") is not None:
            self._utc_base = (_as_int(time_sync["utc_ms"]), self._now())
            self._offset_min = _as_int(time_sync.get("offset_min"))
            self._dirty = True

        board = self._board
        board_name = (board.name if board and board.name else None) or "cores3-se"
        fw = (board.fw_ver if board and board.fw_ver else None) or "0.0.0"
        if board is not None and board.device_id:
            device_id = board.device_id[:39]
        else:
            device_id = f"M5SE-{board_name}"[:39]
        try:
            reply = encode_hello_ack(env.id, 0, board_name, fw, CAPS, device_id, 512)
        except EncodeError:
            return
        self._send(reply)

    def _on_ping(self, env: Any) -> None:
        try:
            reply = encode_pong(env.id, 0, 128)
        except EncodeError:
            return
        self._send(reply)

    def _on_screenshot(self, env: Any) -> None:
        board = self._board
        transport = board.transport if board is not None else None
        frame = self._canvas.raw_frame() if transport is not None else None
        if transport is None or frame is None or not frame.data:
            self._send(encode_screenshot_ack(env.id, 0, False, "capture_unsupported"))
            return
        # Header, base64 pixels in pieces, then the tail: never the whole line at once.
        header = (
            f'{{"v":1,"id":"{env.id}","k":"{Kind.SCREENSHOT_ACK.value}","t":0,'
            f'"p":{{"ok":true,"w":{frame.width},"h":{frame.height},'
            f'"fmt":"{frame.fmt}","data_b64":"'
        )
        transport.write(header.encode("utf-8")[:159])
        base64_encode_stream(frame.data, lambda piece: transport.write(piece.encode("ascii")))
        transport.write(b'"}}\n')

    def _on_tap(self, env: Any) -> None:
        p = env.payload
        if not (_is_int(p.get("x")) and _is_int(p.get("y")) and _is_int(p.get("duration_ms"))):
            self._send(encode_tap_ack(env.id, 0, False, "bad_request"))
            return
        x, y = p["x"], p["y"]
        board = self._board
        if (
            board is None
            or board.display is None
            or board.input is None
            or not board.input.has_touch()
        ):
            self._send(encode_tap_ack(env.id, 0, False, "touch_unsupported"))
            return
        if x < 0 or y < 0 or x >= board.display.width() or y >= board.display.height():
            self._send(encode_tap_ack(env.id, 0, False, "out_of_bounds"))
            return
        self._handle_touch_tap(x, y, self._now())
        self._send(encode_tap_ack(env.id, 0, True, None))

    def _on_status(self, env: Any) -> None:
        was_live = self._link is LinkState.LIVE
        parse_status_frame(env.payload, self._model)
        log.debug("status active=%d", int(self._model.session_active))
        if self._model.session_active:
            board = self._board
            if self._pairing_active() and board is not None and board.stop_ble_pairing:
                board.stop_ble_pairing()
            if not was_live:
                self._page = (
                    PageId.SESSIONS if has_sessions_page(self._model) else PageId.OVERVIEW
                )
            elif not has_sessions_page(self._model) and self._page is PageId.SESSIONS:
                self._page = PageId.OVERVIEW
            self._link = LinkState.LIVE
        else:
            self._link = LinkState.LINKED  # explicit idle
        self._dirty = True

    def _poll_input(self) -> None:
        board = self._board
        if board is None or board.input is None:
            return
        event = board.input.poll()
        if event is None:
            return
        if event.kind == InputKind.TOUCH_LONG_PRESS:
            self._handle_touch_long_press(event.t_ms)
        elif event.kind == InputKind.TOUCH_TAP:
            self._handle_touch_tap(event.x, event.y, event.t_ms)

    def _handle_touch_long_press(self, t_ms: int) -> None:
        if self._link is LinkState.LIVE:
            return
        board = self._board
        if board is None or board.start_ble_pairing is None:
            return
        if board.start_ble_pairing(t_ms):
            self._pairing_started_ms = self._now()
            self._dirty = True

    def _handle_touch_tap(self, x: int, y: int, t_ms: int) -> None:
        if self._link is not LinkState.LIVE:
            return  # paging only on status pages
        sessions_page = has_sessions_page(self._model)
        if self._page is PageId.SESSIONS and sessions_page:
            self._handle_sessions_tap(x, y, t_ms)
            return
        if sessions_page and (y <= 34 or self._page is PageId.WORKSPACE):
            self._page = PageId.SESSIONS
        else:
            self._page = PageId((int(self._page) + 1) % PAGE_COUNT)
        self._dirty = True

    def _handle_sessions_tap(self, x: int, y: int, t_ms: int) -> None:
        model = self._model
        if not model.sessions:
            return
        total_pages = session_page_count_for(model)
        if (
            total_pages > 1
            and SESSION_NEXT_X1 <= x <= SESSION_NEXT_X2
            and SESSION_NEXT_Y1 <= y <= SESSION_NEXT_Y2
        ):
            model.session_page_index = (model.session_page_index + 1) % total_pages
            self._dirty = True
            return
        if x < SESSION_ROW_X or x > SESSION_ROW_X + SESSION_ROW_W:
            return
        start = model.session_page_index * SESSION_ROWS_PER_PAGE
        selected: Optional[int] = None
        for row in range(SESSION_ROWS_PER_PAGE):
            row_y = SESSION_ROW_Y + row * (SESSION_ROW_H + SESSION_ROW_GAP)
            if row_y <= y <= row_y + SESSION_ROW_H:
                if start + row < len(model.sessions):
                    selected = start + row
                break
        if selected is None:
            return
        for index, session in enumerate(model.sessions):
            session.selected = index == selected
        self._send(encode_focus_event_session(t_ms, model.sessions[selected].id))
        self._page = PageId.OVERVIEW
        self._dirty = True

    def _check_link(self) -> None:
        if self._link is LinkState.NO_LINK:
            return
        board = self._board
        # A dropped link (cable pulled) reverts at once, without the timeout.
        if board is not None and board.transport is not None and not board.transport.connected():
            self._link = LinkState.NO_LINK
            self._dirty = True
            return
        if _elapsed(self._now(), self._last_rx_ms) > LINK_TIMEOUT_MS:
            self._link = LinkState.NO_LINK
            self._dirty = True

    def _check_pairing_timeout(self) -> None:
        if not self._pairing_active() or self._pairing_started_ms == 0:
            return
        if _elapsed(self._now(), self._pairing_started_ms) <= BLE_PAIRING_TIMEOUT_MS:
            return
        board = self._board
        if board is not None and board.stop_ble_pairing is not None:
            board.stop_ble_pairing()
        self._pairing_started_ms = 0
        self._dirty = True

    def _pairing_active(self) -> bool:
        board = self._board
        return bool(
            board is not None
            and board.ble_pairing_active is not None
            and board.ble_pairing_active()
        )

    def _render(self) -> None:
        if not self._dirty:
            return
        log.debug("render link=%s page=%s", self._link.name, self._page.name)
        self._canvas.begin()
        self._refresh_device_info()
        board = self._board
        if self._link is LinkState.LIVE:
            render_page(self._page, self._model, self._dev, self._canvas)
        else:
            status = TransportUiStatus()
            if board is not None and board.transport is not None:
                status = board.transport.ui_status()
            pair_code = board.ble_pair_code() if board and board.ble_pair_code else None
            render_waiting(
                self._dev, self._link is LinkState.LINKED, self._canvas, status, pair_code
            )
        self._canvas.end()
        self._dirty = False

    def _refresh_device_info(self) -> None:
        board = self._board
        dev = self._dev
        if board is not None:
            if board.name:
                dev.board = board.name[:23]
            if board.fw_ver:
                dev.fw = board.fw_ver[:15]
            if board.device_id:
                dev.device_id = board.device_id[:23]
            if board.power is not None:
                dev.battery_pct = board.power.battery_pct()
                dev.charging = board.power.charging()
        if self._utc_base is not None:
            utc_ms, synced_at = self._utc_base
            current = utc_ms + _elapsed(self._now(), synced_at)
            utc = datetime.fromtimestamp(current // 1000, tz=timezone.utc)
            local = local_from_utc(
                utc.year, utc.month, utc.day, utc.hour, utc.minute, utc.second,
                self._offset_min,
            )
            dev.clock = f"{local.hour:02d}:{local.minute:02d}"
            dev.date = f"{local.year:04d}-{local.month:02d}-{local.day:02d}"

    def _send(self, line: str) -> None:
        board = self._board
        if board is None or board.transport is None:
            return
        board.transport.write(line.encode("utf-8"))
        board.transport.write(b"\n")