"""Exception hierarchy for Stratus."""

from __future__ import annotations

from typing import Any


class StratusError(Exception):
    """Base exception for all Stratus errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(StratusError):
    """Configuration validation or resolution failed."""


class DecodeError(StratusError):
    """A response document could not be decoded into its target type."""

    def __init__(self, message: str, *, path: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.path = path


class TypeMismatchError(DecodeError):
    """A JSON value's kind is incompatible with the field's declared kind."""

    def __init__(self, *, path: str, expected: str, actual: Any) -> None:
        actual_kind = _json_kind(actual)
        super().__init__(
            f"{path}: expected {expected}, got {actual_kind}",
            path=path,
        )
        self.expected = expected
        self.actual_kind = actual_kind


class TimeParseError(DecodeError):
    """A timestamp field holds something other than an RFC3339 string."""

    def __init__(self, *, path: str, value: Any) -> None:
        super().__init__(
            f"{path}: cannot parse {value!r} as an RFC3339 timestamp",
            path=path,
            hint="Timestamps must be strings like '2015-11-04T05:21:41Z'.",
        )
        self.value = value


class APIError(StratusError):
    """API call failed.

    Carries enough metadata for callers to decide whether a retry makes
    sense without matching on message text.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.retryable = retryable
        self.status_code = status_code
        self.method = method
        self.url = url


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
