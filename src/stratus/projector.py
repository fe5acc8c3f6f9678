"""Decode response documents into records and project records back to maps.

The functions here are pure: they read a decoded JSON document (nested
dicts, lists and scalars) and a `Descriptor`, and return freshly built
values. Nothing is logged or retried; the first conversion failure is raised
to the caller and no partial result escapes.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from datetime import UTC, datetime, timedelta, timezone
import re
from typing import TYPE_CHECKING, Any

from stratus.descriptors import ZERO_TIME, Kind
from stratus.errors import TimeParseError, TypeMismatchError
from stratus.versions import ApiVersion, as_version

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stratus.descriptors import Descriptor, Field

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
)


# --- Decode path ---


def decode_into[T](
    document: Any,
    root_key: str | None,
    descriptor: Descriptor[T],
    *,
    api_version: ApiVersion | str | None = None,
) -> T:
    """Decode the object under ``root_key`` into a record.

    A missing or null root yields the descriptor's zero record, which lets
    callers tell "not found" apart on their own terms.

    Raises:
        TypeMismatchError: A value's JSON kind disagrees with its field.
        TimeParseError: A timestamp field is not an RFC3339 string.
    """
    version = as_version(api_version)
    path = root_key or "$"
    raw = _root(document, root_key)
    if raw is None:
        return descriptor.zero()
    return _decode_record(raw, descriptor, version, path)


def decode_slice_into[T](
    document: Any,
    root_key: str | None,
    descriptor: Descriptor[T],
    *,
    api_version: ApiVersion | str | None = None,
) -> list[T]:
    """Decode the array under ``root_key`` into a list of records.

    Elements are decoded in order; any failing element fails the whole call.
    """
    version = as_version(api_version)
    path = root_key or "$"
    raw = _root(document, root_key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TypeMismatchError(path=path, expected="array", actual=raw)
    return [
        _decode_record(item, descriptor, version, f"{path}[{idx}]")
        for idx, item in enumerate(raw)
    ]


def decode_record[T](
    raw: Any,
    descriptor: Descriptor[T],
    *,
    api_version: ApiVersion | str | None = None,
    path: str | None = None,
) -> T:
    """Decode one JSON object with default rules.

    Custom decoders call this with a plain descriptor of the same record to
    reuse the default coercions before adjusting the result.
    """
    return _decode_record(
        raw,
        descriptor,
        as_version(api_version),
        path or descriptor.name,
    )


def _root(document: Any, root_key: str | None) -> Any:
    if not root_key or document is None:
        return document
    if not isinstance(document, Mapping):
        raise TypeMismatchError(path="$", expected="object", actual=document)
    return document.get(root_key)


def _decode_record[T](
    raw: Any,
    descriptor: Descriptor[T],
    version: ApiVersion | None,
    path: str,
) -> T:
    if raw is None:
        return descriptor.zero()
    if not isinstance(raw, Mapping):
        raise TypeMismatchError(path=path, expected="object", actual=raw)
    if descriptor.decoder is not None:
        return descriptor.decoder(raw, version)

    values: dict[str, Any] = {}
    for field in descriptor.fields:
        if field.key not in raw or not field.visible_at(version):
            values[field.attr] = field.zero()
            continue
        values[field.attr] = _decode_value(
            raw[field.key], field, version, f"{path}.{field.key}"
        )
    # Components read the same object, not a nested key.
    for component in descriptor.components:
        values[component.attr] = _decode_record(
            raw, component.descriptor, version, path
        )
    return descriptor.factory(**values)


def _decode_value(
    value: Any, field: Field, version: ApiVersion | None, path: str
) -> Any:
    if field.decode is not None:
        return field.decode(value)

    kind = field.kind
    if kind is Kind.TIMESTAMP:
        return parse_timestamp(value, path=path)
    if value is None:
        return field.zero()

    if kind is Kind.STRING:
        if isinstance(value, str):
            return value
    elif kind is Kind.BOOL:
        if isinstance(value, bool):
            return value
    elif kind is Kind.INT:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
    elif kind is Kind.FLOAT:
        if isinstance(value, int | float) and not isinstance(value, bool):
            try:
                return float(value)
            except OverflowError as e:
                raise TypeMismatchError(
                    path=path, expected=kind.value, actual=value
                ) from e
    elif kind is Kind.MAPPING:
        if isinstance(value, Mapping):
            return deepcopy(dict(value))
    elif kind is Kind.LIST:
        if isinstance(value, list):
            if field.descriptor is None:
                return deepcopy(value)
            return [
                _decode_record(item, field.descriptor, version, f"{path}[{idx}]")
                for idx, item in enumerate(value)
            ]
    elif kind is Kind.RECORD:
        assert field.descriptor is not None  # enforced by Field
        return _decode_record(value, field.descriptor, version, path)
    else:
        return deepcopy(value)

    raise TypeMismatchError(path=path, expected=kind.value, actual=value)


def parse_timestamp(value: Any, *, path: str = "$") -> datetime:
    """Parse an RFC3339 string; ``None`` maps to ``ZERO_TIME``.

    Numbers are rejected rather than read as epoch seconds.
    """
    if value is None:
        return ZERO_TIME
    if not isinstance(value, str):
        raise TimeParseError(path=path, value=value)
    m = _RFC3339_RE.fullmatch(value)
    if m is None:
        raise TimeParseError(path=path, value=value)

    year, month, day, hour, minute, second = (int(g) for g in m.group(1, 2, 3, 4, 5, 6))
    fraction = m.group(7) or ""
    microsecond = int((fraction + "000000")[:6])
    try:
        if m.group(8):
            tz: timezone = UTC
        else:
            offset = timedelta(hours=int(m.group(10)), minutes=int(m.group(11)))
            tz = timezone(-offset if m.group(9) == "-" else offset)
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError as e:
        raise TimeParseError(path=path, value=value) from e


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as an RFC3339 UTC string with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    else:
        value = value.astimezone(UTC)
    # strftime does not zero-pad years below 1000 on every platform.
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")
    return text + "Z"


# --- Map projection path ---


def project_to_map(
    instance: Any,
    descriptor: Descriptor[Any],
    api_version: ApiVersion | str | None = None,
) -> dict[str, Any]:
    """Project a decoded record into a map keyed by serialized name.

    Fields hidden at ``api_version`` are omitted entirely. Embedded
    components are flattened into the same map.
    """
    out: dict[str, Any] = {}
    _project_into(out, instance, descriptor, as_version(api_version))
    return out


def project_slice_to_map(
    instances: Iterable[Any],
    descriptor: Descriptor[Any],
    api_version: ApiVersion | str | None = None,
) -> list[dict[str, Any]]:
    """Project each record of a list, preserving order."""
    version = as_version(api_version)
    out: list[dict[str, Any]] = []
    for instance in instances:
        projected: dict[str, Any] = {}
        _project_into(projected, instance, descriptor, version)
        out.append(projected)
    return out


def _project_into(
    out: dict[str, Any],
    instance: Any,
    descriptor: Descriptor[Any],
    version: ApiVersion | None,
) -> None:
    for field in descriptor.fields:
        if not field.visible_at(version):
            continue
        out[field.key] = _render(getattr(instance, field.attr), field, version)
    for component in descriptor.components:
        _project_into(
            out, getattr(instance, component.attr), component.descriptor, version
        )


def _render(value: Any, field: Field, version: ApiVersion | None) -> Any:
    if value is None:
        return None
    if field.kind is Kind.TIMESTAMP and isinstance(value, datetime):
        return format_timestamp(value)
    if field.kind is Kind.RECORD and field.descriptor is not None:
        nested: dict[str, Any] = {}
        _project_into(nested, value, field.descriptor, version)
        return nested
    if field.kind is Kind.LIST and field.descriptor is not None:
        return project_slice_to_map(value, field.descriptor, version)
    if isinstance(value, Mapping | list):
        return deepcopy(value)
    return value
