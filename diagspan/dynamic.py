"""A diagnostic whose metadata is chosen at runtime."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Optional

from diagspan.protocol import Diagnostic, LabeledSpan, Severity

_UNSET: Any = object()


def _optional_str(value: Any, what: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{what} must be a string, got {value!r}")
    return value


def _check_label(label: Any) -> LabeledSpan:
    if not isinstance(label, LabeledSpan):
        raise TypeError(f"expected a LabeledSpan, got {type(label).__name__}")
    return label


class DynamicDiagnostic(Diagnostic):
    """A diagnostic built from a message plus optional code, severity, help,
    URL and labels.

    The ``with_*`` and ``and_*`` methods return a new diagnostic and leave the
    original unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        severity: Optional[Severity] = None,
        help: Optional[str] = None,
        url: Optional[str] = None,
        labels: Optional[Iterable[LabeledSpan]] = None,
    ) -> None:
        message = str(message)
        super().__init__(message)
        self.message = message
        self._code = None if code is None else str(code)
        if severity is not None and not isinstance(severity, Severity):
            raise TypeError(f"expected a Severity, got {type(severity).__name__}")
        self._severity = severity
        self._help = None if help is None else str(help)
        self._url = None if url is None else str(url)
        self._labels = (
            None if labels is None else [_check_label(label) for label in labels]
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self._code!r}, "
            f"severity={self._severity!r}, help={self._help!r}, url={self._url!r}, "
            f"labels={self._labels!r})"
        )

    def _key(self) -> tuple[Any, ...]:
        return (
            self.message,
            self._code,
            self._severity,
            self._help,
            self._url,
            self._labels,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DynamicDiagnostic):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def _evolve(
        self,
        *,
        code: Any = _UNSET,
        severity: Any = _UNSET,
        help: Any = _UNSET,
        url: Any = _UNSET,
        labels: Any = _UNSET,
    ) -> "DynamicDiagnostic":
        return type(self)(
            self.message,
            code=self._code if code is _UNSET else code,
            severity=self._severity if severity is _UNSET else severity,
            help=self._help if help is _UNSET else help,
            url=self._url if url is _UNSET else url,
            labels=self._labels if labels is _UNSET else labels,
        )

    def code(self) -> Optional[str]:
        return self._code

    def severity(self) -> Optional[Severity]:
        return self._severity

    def help(self) -> Optional[str]:
        return self._help

    def url(self) -> Optional[str]:
        return self._url

    def labels(self) -> Optional[Iterator[LabeledSpan]]:
        if self._labels is None:
            return None
        return iter(list(self._labels))

    def with_code(self, code: str) -> "DynamicDiagnostic":
        return self._evolve(code=str(code))

    def with_severity(self, severity: Severity) -> "DynamicDiagnostic":
        if not isinstance(severity, Severity):
            raise TypeError(f"expected a Severity, got {type(severity).__name__}")
        return self._evolve(severity=severity)

    def with_help(self, help: str) -> "DynamicDiagnostic":
        return self._evolve(help=str(help))

    def with_url(self, url: str) -> "DynamicDiagnostic":
        return self._evolve(url=str(url))

    def with_label(self, label: LabeledSpan) -> "DynamicDiagnostic":
        """Replace any existing labels with ``label`` alone."""
        return self._evolve(labels=[_check_label(label)])

    def with_labels(self, labels: Iterable[LabeledSpan]) -> "DynamicDiagnostic":
        """Replace any existing labels with ``labels``."""
        return self._evolve(labels=[_check_label(label) for label in labels])

    def and_label(self, label: LabeledSpan) -> "DynamicDiagnostic":
        """Append ``label`` to the existing labels."""
        return self._evolve(labels=[*(self._labels or []), _check_label(label)])

    def and_labels(self, labels: Iterable[LabeledSpan]) -> "DynamicDiagnostic":
        """Append ``labels`` to the existing labels."""
        return self._evolve(
            labels=[*(self._labels or []), *(_check_label(label) for label in labels)]
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out fields that are not set."""
        data: dict[str, Any] = {"message": self.message}
        if self._code is not None:
            data["code"] = self._code
        if self._severity is not None:
            data["severity"] = self._severity.to_json()
        if self._help is not None:
            data["help"] = self._help
        if self._url is not None:
            data["url"] = self._url
        if self._labels is not None:
            data["labels"] = [label.to_dict() for label in self._labels]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DynamicDiagnostic":
        """Parse serialized data; missing and null fields are both unset."""
        if not isinstance(data, dict):
            raise ValueError(f"invalid diagnostic data: {data!r}")
        if "message" not in data:
            raise ValueError("diagnostic data has no message")
        message = data["message"]
        if not isinstance(message, str):
            raise ValueError(f"message must be a string, got {message!r}")
        severity = data.get("severity")
        labels = data.get("labels")
        if labels is not None:
            if not isinstance(labels, list):
                raise ValueError(f"labels must be a list, got {labels!r}")
            labels = [LabeledSpan.from_dict(item) for item in labels]
        return cls(
            message,
            code=_optional_str(data.get("code"), "code"),
            severity=None if severity is None else Severity.from_json(severity),
            help=_optional_str(data.get("help"), "help"),
            url=_optional_str(data.get("url"), "url"),
            labels=labels,
        )