"""Diagnostics with labelled source spans, span reading with context lines,
and diagnostics built at runtime."""

__version__ = "0.1.0"
__all__ = ["dynamic", "named_source", "protocol", "source_impls"]