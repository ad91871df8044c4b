"""Core diagnostic protocol: severities, spans, labels and source access."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import IntEnum
from pathlib import Path
from typing import Any, Optional


class SpanError(Exception):
    """Base error raised while locating or reading source spans."""


class OutOfBoundsError(SpanError):
    """Raised when a span lies outside the source it is read from."""

    def __init__(self, message: str = "OutOfBounds") -> None:
        super().__init__(message)


def _check_count(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{what} must not be negative, got {value}")
    return value


class Severity(IntEnum):
    """How serious a diagnostic is; ``ERROR`` is the default."""

    ADVICE = 0
    WARNING = 1
    ERROR = 2

    def to_json(self) -> str:
        """Return the serialized name, e.g. ``"Warning"``."""
        return self.name.capitalize()

    @classmethod
    def from_json(cls, value: Any) -> "Severity":
        """Parse a serialized severity name."""
        for member in cls:
            if member.to_json() == value:
                return member
        raise ValueError(f"unknown severity: {value!r}")


@dataclass(frozen=True, order=True)
class SourceOffset:
    """A byte offset from the beginning of some source code."""

    offset: int

    def __post_init__(self) -> None:
        _check_count(self.offset, "offset")

    @classmethod
    def from_location(cls, source: str, loc_line: int, loc_col: int) -> "SourceOffset":
        """Convert a 1-based line/column pair into a byte offset.

        Out-of-range locations give the offset of the end of the source.
        """
        line = 0
        col = 0
        offset = 0
        for char in source:
            if line + 1 >= loc_line and col + 1 >= loc_col:
                break
            if char == "\n":
                col = 0
                line += 1
            else:
                col += 1
            offset += len(char.encode("utf-8"))
        return cls(offset)

    @classmethod
    def from_current_location(cls) -> tuple[str, "SourceOffset"]:
        """Return the caller's file name and its offset within that file."""
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        if caller is None:
            raise SpanError("caller location is not available")
        try:
            info = inspect.getframeinfo(caller, context=0)
            filename = info.filename
            line = info.lineno
            column = 1
            positions = getattr(info, "positions", None)
            if positions is not None and positions.col_offset is not None:
                column = positions.col_offset + 1
        finally:
            del frame, caller
        try:
            text = Path(filename).read_text(encoding="utf-8")
        except OSError as exc:
            raise SpanError(f"cannot read {filename}: {exc}") from exc
        return filename, cls.from_location(text, line, column)

    def to_json(self) -> int:
        """Serialize as a bare integer."""
        return self.offset

    @classmethod
    def from_json(cls, value: Any) -> "SourceOffset":
        """Parse a bare integer offset."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected an integer offset, got {value!r}")
        return cls(value)


@dataclass(frozen=True, order=True)
class SourceSpan:
    """A run of ``length`` bytes starting at ``offset``."""

    offset: int
    length: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.offset, SourceOffset):
            object.__setattr__(self, "offset", self.offset.offset)
        _check_count(self.offset, "offset")
        _check_count(self.length, "length")

    @classmethod
    def coerce(cls, value: Any) -> "SourceSpan":
        """Build a span from a span, offset, ``(start, length)`` pair or range."""
        if isinstance(value, SourceSpan):
            return value
        if isinstance(value, SourceOffset):
            return cls(value.offset, 0)
        if isinstance(value, range):
            if value.step != 1:
                raise ValueError("only ranges with a step of 1 can become spans")
            return cls(value.start, len(value))
        if isinstance(value, tuple):
            if len(value) != 2:
                raise ValueError("a span tuple must be (start, length)")
            start, length = value
            if isinstance(start, SourceOffset):
                start = start.offset
            return cls(start, length)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value, 0)
        raise TypeError(f"cannot make a span from {type(value).__name__}")

    @property
    def source_offset(self) -> SourceOffset:
        return SourceOffset(self.offset)

    @property
    def end(self) -> int:
        return self.offset + self.length

    def is_empty(self) -> bool:
        """True when the span has zero length."""
        return self.length == 0

    def to_dict(self) -> dict[str, int]:
        return {"offset": self.offset, "length": self.length}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceSpan":
        try:
            offset = data["offset"]
            length = data["length"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid span data: {data!r}") from exc
        return cls(
            SourceOffset.from_json(offset).offset,
            SourceOffset.from_json(length).offset,
        )


@dataclass
class LabeledSpan:
    """A span with an optional label; ``primary`` marks the main one."""

    label: Optional[str]
    span: SourceSpan
    primary: bool = False

    def __post_init__(self) -> None:
        self.span = SourceSpan.coerce(self.span)

    @classmethod
    def new_with_span(cls, label: Optional[str], span: Any) -> "LabeledSpan":
        return cls(label, SourceSpan.coerce(span))

    @classmethod
    def new_primary_with_span(cls, label: Optional[str], span: Any) -> "LabeledSpan":
        return cls(label, SourceSpan.coerce(span), primary=True)

    @classmethod
    def at(cls, span: Any, label: str) -> "LabeledSpan":
        """A labelled span covering ``span``."""
        return cls.new_with_span(str(label), span)

    @classmethod
    def at_offset(cls, offset: int, label: str) -> "LabeledSpan":
        """A zero-length labelled span pointing at ``offset``."""
        return cls(str(label), SourceSpan(offset, 0))

    @classmethod
    def underline(cls, span: Any) -> "LabeledSpan":
        """An unlabelled span covering ``span``."""
        return cls.new_with_span(None, span)

    @property
    def offset(self) -> int:
        return self.span.offset

    @property
    def length(self) -> int:
        return self.span.length

    def is_empty(self) -> bool:
        return self.span.is_empty()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.label is not None:
            data["label"] = self.label
        data["span"] = self.span.to_dict()
        data["primary"] = self.primary
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LabeledSpan":
        try:
            span = data["span"]
            primary = data["primary"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid labeled span data: {data!r}") from exc
        label = data.get("label")
        if label is not None and not isinstance(label, str):
            raise ValueError(f"label must be a string, got {label!r}")
        if not isinstance(primary, bool):
            raise ValueError(f"primary must be a bool, got {primary!r}")
        return cls(label, SourceSpan.from_dict(span), primary)


@dataclass(frozen=True)
class SpanContents:
    """Bytes read from source code for a span, with position information."""

    data: bytes
    span: SourceSpan
    line: int
    column: int
    line_count: int
    name: Optional[str] = None
    language: Optional[str] = None

    def with_language(self, language: str) -> "SpanContents":
        """Return a copy tagged with a language name for highlighting."""
        return replace(self, language=str(language))


class SourceCode(ABC):
    """Anything from which spans of source can be read."""

    @abstractmethod
    def read_span(
        self,
        span: SourceSpan,
        context_lines_before: int,
        context_lines_after: int,
    ) -> SpanContents:
        """Read ``span`` plus the requested lines of context around it."""


class Diagnostic(Exception):
    """An error carrying extra metadata for rich reporting.

    Accessors return ``None`` unless a subclass or the instance provides a
    value. Subclasses may set ``_source_code`` and ``_related`` to attach
    source code and related diagnostics; the cause of the error is taken
    from explicit exception chaining (``raise ... from ...``).
    """

    _source_code: Optional[SourceCode] = None
    _related: tuple = ()

    def code(self) -> Optional[str]:
        return None

    def severity(self) -> Optional[Severity]:
        return None

    def help(self) -> Optional[str]:
        return None

    def url(self) -> Optional[str]:
        return None

    def source_code(self) -> Optional[SourceCode]:
        """Source code the labels apply to, if one is attached."""
        source = self._source_code
        return source if isinstance(source, SourceCode) else None

    def labels(self) -> Optional[Iterator[LabeledSpan]]:
        return None

    def related(self) -> Optional[Iterator["Diagnostic"]]:
        """Iterate over attached related diagnostics, or ``None`` if none."""
        items = [item for item in self._related if isinstance(item, Diagnostic)]
        return iter(items) if items else None

    def diagnostic_source(self) -> Optional["Diagnostic"]:
        """The diagnostic this one was raised from, if any."""
        cause = self.__cause__
        return cause if isinstance(cause, Diagnostic) else None