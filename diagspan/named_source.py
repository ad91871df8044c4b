"""Source code paired with a display name and an optional language."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from diagspan.protocol import SourceCode, SourceSpan, SpanContents
from diagspan.source_impls import read_span


@dataclass(frozen=True)
class NamedSource(SourceCode):
    """Wraps source code so that the spans read from it carry ``name``."""

    name: str
    source: Any
    language: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))

    def __repr__(self) -> str:
        return (
            f"NamedSource(name={self.name!r}, source='<redacted>', "
            f"language={self.language!r})"
        )

    def with_language(self, language: str) -> "NamedSource":
        """Return a copy tagged with a language name for highlighting."""
        return replace(self, language=str(language))

    def read_span(
        self,
        span: Any,
        context_lines_before: int = 0,
        context_lines_after: int = 0,
    ) -> SpanContents:
        """Read from the wrapped source and attach this name and language."""
        contents = read_span(
            self.source, SourceSpan.coerce(span), context_lines_before, context_lines_after
        )
        return replace(contents, name=self.name, language=self.language)