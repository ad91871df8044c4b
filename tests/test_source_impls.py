import pytest

from diagspan.protocol import OutOfBoundsError, SourceCode, SourceSpan, SpanContents
from diagspan.source_impls import context_info, read_span


def test_basic():
    contents = read_span("foo\n", (0, 4), 0, 0)
    assert contents.data.decode() == "foo\n"
    assert contents.line == 0
    assert contents.column == 0


def test_shifted():
    contents = read_span("foobar", (3, 3), 1, 1)
    assert contents.data.decode() == "foobar"
    assert contents.line == 0
    assert contents.column == 0


def test_middle():
    contents = read_span("foo\nbar\nbaz\n", (4, 4), 0, 0)
    assert contents.data.decode() == "bar\n"
    assert contents.line == 1
    assert contents.column == 0


def test_middle_of_line():
    contents = read_span("foo\nbarbar\nbaz\n", (7, 4), 0, 0)
    assert contents.data.decode() == "bar\n"
    assert contents.line == 1
    assert contents.column == 3


def test_with_crlf():
    contents = read_span("foo\r\nbar\r\nbaz\r\n", (5, 5), 0, 0)
    assert contents.data.decode() == "bar\r\n"
    assert contents.line == 1
    assert contents.column == 0


def test_with_context():
    contents = read_span("xxx\nfoo\nbar\nbaz\n\nyyy\n", (8, 3), 1, 1)
    assert contents.data.decode() == "foo\nbar\nbaz\n"
    assert contents.line == 1
    assert contents.column == 0


def test_multiline_with_context():
    contents = read_span("aaa\nxxx\n\nfoo\nbar\nbaz\n\nyyy\nbbb\n", (9, 11), 1, 1)
    assert contents.data.decode() == "\nfoo\nbar\nbaz\n\n"
    assert contents.line == 2
    assert contents.column == 0
    assert contents.span == SourceSpan(8, 14)


def test_multiline_with_context_line_start():
    contents = read_span(
        "one\ntwo\n\nthree\nfour\nfive\n\nsix\nseven\n", (2, 0), 2, 2
    )
    assert contents.data.decode() == "one\ntwo\n\n"
    assert contents.line == 0
    assert contents.column == 0
    assert contents.span == SourceSpan(0, 9)


def test_bytes_and_str_agree():
    text = "foo\nbarbar\nbaz\n"
    from_str = read_span(text, (7, 4), 0, 0)
    from_bytes = read_span(text.encode(), (7, 4), 0, 0)
    from_bytearray = context_info(bytearray(text.encode()), SourceSpan(7, 4), 0, 0)
    assert from_str == from_bytes == from_bytearray


def test_span_range_accepted():
    assert read_span("foo\nbar\nbaz\n", range(4, 8)).data == b"bar\n"


def test_bad_offset_is_out_of_bounds():
    with pytest.raises(OutOfBoundsError):
        read_span("blabla blibli", (50, 6), 0, 0)


def test_bad_length_is_out_of_bounds():
    with pytest.raises(OutOfBoundsError):
        read_span("blabla blibli", (0, 50), 0, 0)


def test_data_matches_span_slice():
    text = b"aaa\nxxx\n\nfoo\nbar\nbaz\n\nyyy\nbbb\n"
    contents = read_span(text, (9, 11), 1, 1)
    assert contents.data == text[contents.span.offset:contents.span.end]


def test_source_code_is_delegated():
    expected = SpanContents(b"abc", SourceSpan(1, 3), 0, 1, 1)

    class Fixed(SourceCode):
        def __init__(self):
            self.calls = []

        def read_span(self, span, context_lines_before, context_lines_after):
            self.calls.append((span, context_lines_before, context_lines_after))
            return expected

    fixed = Fixed()
    assert read_span(fixed, (1, 3), 2, 4) is expected
    assert fixed.calls == [(SourceSpan(1, 3), 2, 4)]


def test_unsupported_source_type():
    with pytest.raises(TypeError):
        read_span(12345, (0, 1))