# diagspan

Building blocks for rich error diagnostics. The package provides severities, byte spans into source text and labels on those spans. It can read a span back out of its source together with the lines around it, and it can build diagnostics at runtime that serialize to and from JSON-ready dicts.

It has no dependencies beyond the standard library.

## Install

```
pip install diagspan
```

## Modules

- `diagspan.protocol` holds the following:
  - `Severity` (`ADVICE`, `WARNING`, `ERROR`)
  - `SourceOffset`, `SourceSpan` and `LabeledSpan`
  - `SpanContents`
  - the abstract `SourceCode`
  - the `Diagnostic` exception base class
  - the errors `SpanError` and `OutOfBoundsError`
- `diagspan.source_impls` has `context_info` and `read_span`. These read spans from text, bytes or any `SourceCode`.
- `diagspan.named_source` has `NamedSource`, which is source code with a display name and an optional language.
- `diagspan.dynamic` has `DynamicDiagnostic`, a diagnostic whose metadata is chosen at runtime.

## Spans and labels

```python
from diagspan.protocol import LabeledSpan, SourceOffset, SourceSpan

span = SourceSpan.coerce((4, 3))          # offset 4, length 3
same = SourceSpan.coerce(range(4, 7))     # ranges with step 1 work too
point = SourceSpan.coerce(4)              # a bare int is a zero-length span

label = LabeledSpan.at(range(0, 3), "should be something else")
marker = LabeledSpan.at_offset(4, "expected a closing parenthesis")
plain = LabeledSpan.underline(range(12, 16))
main = LabeledSpan.new_primary_with_span("here", (0, 3))

# 1-based line/column to a byte offset; out-of-range gives the end of the text
offset = SourceOffset.from_location("f\n\noo\r\nbar", 3, 2)   # SourceOffset(4)
```

Serialization works as follows:

- `SourceSpan.to_dict()` gives `{"offset": ..., "length": ...}`.
- `LabeledSpan.to_dict()` leaves out `label` when it is `None`.
- `SourceOffset.to_json()` gives a bare integer.
- `Severity.to_json()` gives `"Advice"`, `"Warning"` or `"Error"`.
- Each has a matching `from_dict` or `from_json` classmethod that reads the value back.

## Reading spans with context

```python
from diagspan.named_source import NamedSource
from diagspan.protocol import SourceSpan
from diagspan.source_impls import read_span

contents = read_span("xxx\nfoo\nbar\nbaz\n\nyyy\n", SourceSpan.coerce((8, 3)), 1, 1)
# contents.data == b"foo\nbar\nbaz\n", contents.line == 1, contents.column == 0

named = NamedSource("config.toml", "key = value\n").with_language("TOML")
contents = named.read_span((0, 3), 0, 0)
# contents.name == "config.toml", contents.language == "TOML"
```

A `SpanContents` carries these fields:

- `data`: the bytes that were read.
- `span`: the span actually covered, context included.
- `line` and `column`: 0-based.
- `line_count`
- `name` and `language`: optional.

Offsets are byte offsets into the UTF-8 encoding of text sources. A `\r\n` pair counts as a single line break.

Reading a span that runs past the end of its source raises `OutOfBoundsError`, which is a subclass of `SpanError`.

## Diagnostics built at runtime

```python
from diagspan.dynamic import DynamicDiagnostic
from diagspan.protocol import LabeledSpan, Severity

diag = (
    DynamicDiagnostic("Typos in 'hello world'")
    .with_code("spelling::typo")
    .with_severity(Severity.WARNING)
    .with_help("check the spelling")
    .and_label(LabeledSpan.at_offset(3, "add 'l'"))
    .and_label(LabeledSpan.at_offset(6, "add 'r'"))
)
str(diag)        # "Typos in 'hello world'"
diag.to_dict()   # JSON-ready, with fields that are unset left out
DynamicDiagnostic.from_dict(diag.to_dict()) == diag   # True
```

Each `with_*` and `and_*` method returns a new diagnostic.

- `with_label` and `with_labels` replace the existing labels.
- `and_label` and `and_labels` append to them.

`DynamicDiagnostic` is an exception, so it can be raised directly.

## Your own diagnostics

Subclass `Diagnostic` and override whichever of these methods apply:

- `code`
- `severity`
- `help`
- `url`
- `labels`

Related pieces come from attributes and exception chaining:

- `source_code()` returns `_source_code` when it is set to a `SourceCode`.
- `related()` iterates over the `Diagnostic` instances in `_related`.
- `diagnostic_source()` returns the `Diagnostic` given in `raise ... from ...`.

## What it does not do

The package holds the data a diagnostic report is built from. It does not lay out that data as text. There is no handler that prints reports with colours, underlines, wrapping or syntax highlighting, and no command-line tool.