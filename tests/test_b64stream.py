import pytest

from statusdeck.b64stream import base64_encode, base64_encode_stream


@pytest.mark.parametrize(
    "raw, encoded",
    [(b"", ""), (b"M", "TQ=="), (b"Ma", "TWE="), (b"Man", "TWFu")],
)
def test_base64_basic(raw, encoded):
    assert base64_encode(raw) == encoded


def test_base64_png_magic():
    assert base64_encode(bytes([0x89, ord("P"), ord("N"), ord("G")])) == "iVBORw=="


def test_base64_stream_matches():
    data = bytes([0x12, 0x34, 0x56, 0x78, 0x9A, 0xBC, 0xDE, 0xF0])
    pieces = []
    base64_encode_stream(data, pieces.append)
    assert "".join(pieces) == "EjRWeJq83vA="
    assert "".join(pieces) == base64_encode(data)


def test_stream_of_empty_writes_nothing():
    pieces = []
    base64_encode_stream(b"", pieces.append)
    assert pieces == []


def test_stream_splits_large_input_into_bounded_pieces():
    data = bytes(i % 251 for i in range(10000))
    pieces = []
    base64_encode_stream(data, pieces.append)
    assert len(pieces) > 1
    assert all(len(p) <= 4096 for p in pieces)
    assert all(len(p) % 4 == 0 for p in pieces)
    assert "".join(pieces) == base64_encode(data)