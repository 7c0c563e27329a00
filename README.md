# statusdeck

`statusdeck` is the device-side logic of a small touch-screen status display
that shows what a coding assistant session is doing: context usage, the
5-hour block, cost, git state, and a picker when several terminals are
running. A host sends newline-delimited JSON frames; the device answers,
keeps a status model and draws pages through an abstract canvas.

## Modules

- `statusdeck.codec` – the envelope protocol. `decode(line)` returns a
  `DecodedEnvelope` (`kind`, `id`, `t`, `doc`, `payload`) or raises
  `DecodeError`, whose `result` is a `DecodeResult` (`BAD_JSON`, `BAD_SHAPE`,
  `BAD_VERSION`). Replies: `encode_pong`, `encode_hello_ack` (both take an
  optional `max_len` and raise `EncodeError` if the line would not fit),
  `encode_screenshot_ack`, `encode_tap_ack` and `encode_focus_event_session`.
  `Kind` lists the message kinds; `PROTOCOL_VERSION` is 1.
- `statusdeck.ndjson` – `NdjsonFramer`: `push(data)` returns the lines a
  chunk completed, skipping empty lines and dropping any line of `max_len`
  (default 3072) bytes or more; `NdjsonFramer.frame(line)` appends the newline.
- `statusdeck.b64stream` – `base64_encode(data)` and
  `base64_encode_stream(data, write)`, which hands the output to `write` in
  pieces of at most 4096 characters.
- `statusdeck.status_model` – `StatusModel`, `DeviceInfo`, `TopFile`,
  `SessionSummary`, `Activity`, `parse_activity` and
  `parse_status_frame(payload, model=None)`, which applies a `status` payload
  (a JSON text or a mapping) to a model. Invalid JSON raises
  `StatusParseError`. The burn history keeps the newest 16 samples, top files
  at most 3 and sessions at most 8.
- `statusdeck.canvas` – the `Canvas` drawing interface, `RawFrame`, the
  `Color` palette, `Font`, `Align` and `rgb565(r, g, b)`.
- `statusdeck.pages` – `PageId` and the renderers `render_page`,
  `render_waiting`, `render_header`, `render_page_dots`, `render_footer`,
  plus helpers `activity_label`, `activity_color`, `blend565`,
  `badge_brightness_for`, `has_sessions_page`, `page_count_for` and
  `session_page_count_for`.
- `statusdeck.app` – `App(canvas, board, clock=None)` and `LinkState`.
  `boot()` starts the transport and draws the waiting screen; `tick()` polls
  input, checks the link, drains the transport and redraws when something
  changed; `handle_line(line)` handles one envelope directly.
- `statusdeck.time_util` – `local_from_utc(...)` returning a `LocalClock`.
- `statusdeck.hal` – the hardware interfaces `Display`, `Input`, `Power`,
  `Transport` and the `Board` that bundles them, with `InputEvent`,
  `InputKind`, `TransportKind`, `BleUiState` and `TransportUiStatus`.
- `statusdeck.transport_mux` – `TransportMux(serial, ble)`: reads from
  whichever link has data (serial first), writes to the link last heard from.
- `statusdeck.ring_buffer` – `ByteRingBuffer(capacity)`, a bounded byte FIFO
  that discards writes once full.
- `statusdeck.device_id` – `format_device_id(prefix, suffix)`.
- `statusdeck.mock_hal` – in-memory `MockDisplay`, `MockInput`, `MockPower`,
  `MockTransport` and `create_mock_board()`.
- `statusdeck.recording_canvas` – `RecordingCanvas`, a 320×240 canvas that
  records each call as `"<prim>"` or `"<prim>:<arg>"` and offers `called`,
  `called_prefix` and `count_prefix`.

## What the app does

- `hello` is answered with a `hello.ack` carrying board name, firmware,
  capabilities (`display`, `touch`) and device id. If the payload has
  `time.utc_ms` (and optionally `time.offset_min`, minutes east of UTC), the
  date and clock shown on screen follow it.
- `ping` is answered with `pong`.
- `screenshot` streams a `screenshot.ack` whose `data_b64` holds the canvas's
  raw frame; a canvas without capture gets `{"ok":false,"err":"capture_unsupported"}`.
- `tap` with integer `x`, `y` and `duration_ms` acts as a touch and is
  acknowledged; errors are `bad_request`, `touch_unsupported` and
  `out_of_bounds`.
- `status` updates the model. An active status makes the link `LIVE` and
  shows the Overview page (or the Terminals picker if there are two or more
  sessions); an idle one returns to `LINKED`.
- Any decoded frame moves `NO_LINK` to `LINKED`. Fifteen seconds without a
  frame, or the transport reporting itself disconnected, returns to `NO_LINK`.
- While live, taps cycle Overview, Cost, Limits and Workspace. With two or
  more sessions a tap on the header, or on the Workspace page, opens the
  picker; tapping a row there selects that session, sends a `device.event`
  focus message and returns to Overview.
- While not live, a long press calls the board's `start_ble_pairing`;
  pairing is stopped after five minutes or when an active status arrives.

## Installation

```
pip install statusdeck
```

There are no runtime dependencies. The `test` extra installs pytest for the
test suite:

```
pip install "statusdeck[test]"
```

## Examples

```python
from statusdeck.device_id import format_device_id

format_device_id("M5SE", 0xA1B2C3)   # "M5SE-A1B2C3"
format_device_id("M5CP", 1)          # "M5CP-000001"
```

```python
from statusdeck.time_util import local_from_utc

clock = local_from_utc(2026, 5, 31, 20, 0, 0, 480)
(clock.month, clock.day, clock.hour)   # (6, 1, 4)
```

```python
from statusdeck import codec

env = codec.decode('{"v":1,"id":"abc","k":"ping","t":12345,"p":{}}')
reply = codec.encode_pong(env.id, 0, 256)
```

Running the whole app against the in-memory hardware:

```python
from statusdeck.app import App, LinkState
from statusdeck.mock_hal import create_mock_board
from statusdeck.recording_canvas import RecordingCanvas

board = create_mock_board()
canvas = RecordingCanvas()
app = App(canvas, board, lambda: 0)
app.boot()
app.handle_line('{"v":1,"k":"status","t":0,"p":{"state":"active"}}')
assert app.link is LinkState.LIVE
```

## What it does not do

The package contains no drivers for real screens, touch panels, batteries,
serial ports or Bluetooth, and no command to start a device. To run it on
real hardware you supply your own `Canvas` and `Board` implementations (with
their `Display`, `Input`, `Power` and `Transport`) and call `App.tick()` in a
loop. It also contains no host-side program that sends `status` frames.