"""Reading spans, with lines of context, out of in-memory source text."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Any, Union

from diagspan.protocol import OutOfBoundsError, SourceCode, SourceSpan, SpanContents

_CR = 0x0D
_LF = 0x0A

BytesLike = Union[bytes, bytearray, memoryview]


def _units(data: bytes) -> Iterator[tuple[int, int]]:
    """Yield ``(byte, width)`` pairs, folding ``\\r\\n`` into one unit of width 2."""
    pending_cr = False
    for byte in data:
        if pending_cr:
            pending_cr = False
            if byte == _LF:
                yield _CR, 2
                continue
            yield _CR, 1
        if byte == _CR:
            pending_cr = True
        else:
            yield byte, 1
    if pending_cr:
        yield _CR, 1


def context_info(
    data: BytesLike,
    span: Any,
    context_lines_before: int = 0,
    context_lines_after: int = 0,
) -> SpanContents:
    """Locate ``span`` in ``data`` and widen it by whole lines of context.

    Raises :class:`OutOfBoundsError` when the span does not fit in ``data``.
    """
    span = SourceSpan.coerce(span)
    data = bytes(data)
    if context_lines_before < 0 or context_lines_after < 0:
        raise ValueError("context line counts must not be negative")

    span_start = span.offset
    # Two distinct "last byte" thresholds, matching how each is saturated.
    after_start = span_start + max(span.length - 1, 0)
    last_byte = max(span_start + span.length - 1, 0)

    offset = 0
    line_count = 0
    start_line = 0
    start_column = 0
    before_lines_starts: deque[int] = deque()
    current_line_start = 0
    end_lines = 0
    post_span = False
    post_span_got_newline = False

    for char, width in _units(data):
        if char in (_CR, _LF):
            line_count += 1
            offset += width - 1
            if offset < span_start:
                start_column = 0
                before_lines_starts.append(current_line_start)
                if len(before_lines_starts) > context_lines_before:
                    start_line += 1
                    before_lines_starts.popleft()
            elif offset >= after_start and post_span:
                start_column = 0
                if post_span_got_newline:
                    end_lines += 1
                else:
                    post_span_got_newline = True
                if end_lines >= context_lines_after:
                    offset += 1
                    break
            current_line_start = offset + 1
        elif offset < span_start:
            start_column += 1

        if offset >= last_byte:
            post_span = True
            if end_lines >= context_lines_after:
                offset += 1
                break

        offset += 1

    if offset < last_byte:
        raise OutOfBoundsError()

    if before_lines_starts:
        starting_offset = before_lines_starts[0]
    elif context_lines_before == 0:
        starting_offset = span_start
    else:
        starting_offset = 0
    if starting_offset > offset:
        raise OutOfBoundsError()

    return SpanContents(
        data=data[starting_offset:offset],
        span=SourceSpan(starting_offset, offset - starting_offset),
        line=start_line,
        column=start_column if context_lines_before == 0 else 0,
        line_count=line_count,
    )


def read_span(
    source: Union[SourceCode, str, BytesLike],
    span: Any,
    context_lines_before: int = 0,
    context_lines_after: int = 0,
) -> SpanContents:
    """Read ``span`` from text, bytes or any :class:`SourceCode`."""
    if isinstance(source, SourceCode):
        return source.read_span(
            SourceSpan.coerce(span), context_lines_before, context_lines_after
        )
    if isinstance(source, str):
        return context_info(
            source.encode("utf-8"), span, context_lines_before, context_lines_after
        )
    if isinstance(source, (bytes, bytearray, memoryview)):
        return context_info(source, span, context_lines_before, context_lines_after)
    raise TypeError(f"cannot read spans from {type(source).__name__}")