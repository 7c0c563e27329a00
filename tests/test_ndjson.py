from statusdeck.ndjson import NdjsonFramer


def test_emits_one_complete_line():
    f = NdjsonFramer()
    assert f.push(b"hello\n") == [b"hello"]


def test_buffers_partial_until_newline():
    f = NdjsonFramer()
    assert f.push(b"part1") == []
    assert f.push(b"part2") == []
    assert f.push(b"\n") == [b"part1part2"]


def test_multiple_lines_in_one_chunk():
    f = NdjsonFramer()
    assert f.push(b"a\nb\nc\n") == [b"a", b"b", b"c"]


def test_skips_empty_lines():
    f = NdjsonFramer()
    assert f.push(b"a\n\n\nb\n") == [b"a", b"b"]


def test_truncates_oversize_line():
    f = NdjsonFramer(max_len=8)
    assert f.push(b"x" * 20 + b"\nok\n") == [b"ok"]


def test_oversize_across_chunks_resyncs():
    f = NdjsonFramer(max_len=8)
    assert f.push(b"xxxx") == []
    assert f.push(b"xxxxxx") == []
    assert f.push(b"yy\nok\n") == [b"ok"]


def test_line_just_under_limit_is_kept():
    f = NdjsonFramer(max_len=8)
    assert f.push(b"1234567\n") == [b"1234567"]
    assert f.push(b"12345678\n") == []


def test_accepts_text_chunks():
    f = NdjsonFramer()
    assert f.push("abc\n") == [b"abc"]


def test_frame_appends_newline():
    assert NdjsonFramer.frame("hello") == b"hello\n"