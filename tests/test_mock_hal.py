from statusdeck.hal import InputEvent, InputKind
from statusdeck.mock_hal import (
    DrawTextCall,
    FillRectCall,
    MockDisplay,
    MockInput,
    MockPower,
    MockTransport,
    create_mock_board,
)


def test_display_records_text_and_rects():
    d = MockDisplay()
    d.draw_text(1, 2, "hello", 2)
    d.fill_rect(0, 0, 4, 5, 0x123456)
    assert d.last_text == "hello"
    assert d.texts == [DrawTextCall(1, 2, "hello", 2)]
    assert d.rects == [FillRectCall(0, 0, 4, 5, 0x123456)]


def test_display_contains_text_substring():
    d = MockDisplay()
    d.draw_text(0, 0, "Waiting for host", 1)
    assert d.contains_text("for host")
    assert not d.contains_text("Connected")


def test_display_clear_counts_and_empties():
    d = MockDisplay()
    d.draw_text(0, 0, "x", 1)
    d.clear()
    d.clear()
    assert d.cleared_count == 2
    assert d.texts == []
    assert d.last_text == ""


def test_display_reset_zeroes_counter():
    d = MockDisplay()
    d.clear()
    d.fill_rect(0, 0, 1, 1, 0)
    d.reset()
    assert d.cleared_count == 0
    assert d.rects == []


def test_display_size():
    d = MockDisplay()
    assert (d.width(), d.height()) == (320, 240)


def test_input_replays_events_in_order():
    i = MockInput()
    first = InputEvent(InputKind.TOUCH_TAP, x=10, y=20, t_ms=5)
    second = InputEvent(InputKind.TOUCH_LONG_PRESS, x=30, y=40, t_ms=2000)
    i.feed(first)
    i.feed(second)
    assert i.poll() == first
    assert i.poll() == second
    assert i.poll() is None


def test_input_reports_touch_only():
    i = MockInput()
    assert i.has_touch() is True
    assert i.has_keyboard() is False


def test_power_full_and_charging():
    p = MockPower()
    assert p.battery_pct() == 100
    assert p.charging() is True


def test_transport_reads_fed_bytes_in_pieces():
    t = MockTransport()
    t.feed("hello")
    t.feed(b"\n")
    assert t.read(3) == b"hel"
    assert t.read(100) == b"lo\n"
    assert t.read(10) == b""


def test_transport_write_then_drain():
    t = MockTransport()
    assert t.write(b'{"k":"pong"}') == len(b'{"k":"pong"}')
    t.write(b"\n")
    assert t.drain_tx() == '{"k":"pong"}\n'
    assert t.drain_tx() == ""


def test_transport_connection_toggle():
    t = MockTransport()
    assert t.connected() is True
    t.set_connected(False)
    assert t.connected() is False
    assert t.begin() is True


def test_create_mock_board_wires_fresh_mocks():
    a = create_mock_board()
    b = create_mock_board()
    assert (a.name, a.fw_ver, a.device_id) == ("mock", "0.0.0", "MOCK-000001")
    assert isinstance(a.transport, MockTransport)
    assert a.input.has_touch() is True
    assert a.transport is not b.transport
    a.transport.feed("x")
    assert b.transport.read(1) == b""