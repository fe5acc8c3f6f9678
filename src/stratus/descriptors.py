"""Static field-metadata tables describing how documents map onto records.

A `Descriptor` is built once per target type and never changes afterwards.
It lists the record's fields in order, each with its serialized name, its
semantic `Kind`, optional API-version bounds and an optional decode hook.
Composite records list their embedded parts as `Component`s; every component
decodes from the same flat JSON object as its parent.

Example:
    ```python
    @dataclass
    class Server:
        id: str
        network_id: str

    SERVER = Descriptor(
        name="server",
        factory=Server,
        fields=(
            Field("id", kind=Kind.STRING),
            Field("network_id", kind=Kind.STRING, min_version="2.10"),
        ),
    )
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from stratus.versions import ApiVersion, as_version, version_allows

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

#: Value of a timestamp field that is absent or null in the document.
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)


class Kind(Enum):
    """Semantic type of a record field."""

    STRING = "string"
    INT = "integer"
    FLOAT = "number"
    BOOL = "boolean"
    TIMESTAMP = "timestamp"
    MAPPING = "object"
    LIST = "array"
    RECORD = "record"
    ANY = "any"


_SCALAR_ZEROS: dict[Kind, Any] = {
    Kind.STRING: "",
    Kind.INT: 0,
    Kind.FLOAT: 0.0,
    Kind.BOOL: False,
    Kind.TIMESTAMP: ZERO_TIME,
}


@dataclass(frozen=True)
class Field:
    """One entry of a descriptor's field table.

    Attributes:
        attr: Attribute name on the target record (factory keyword).
        name: Serialized name in the JSON document; defaults to ``attr``.
        kind: Semantic type used for coercion and rendering.
        min_version: Lowest API version at which the field exists.
        max_version: Highest API version at which the field exists.
        decode: Hook receiving the raw JSON value; replaces default coercion.
        descriptor: Nested descriptor for RECORD fields and record lists.
    """

    attr: str
    name: str | None = None
    kind: Kind = Kind.ANY
    min_version: ApiVersion | str | None = None
    max_version: ApiVersion | str | None = None
    decode: Callable[[Any], Any] | None = None
    descriptor: Descriptor[Any] | None = None

    def __post_init__(self) -> None:
        """Normalize names and versions, then validate the entry."""
        if not self.attr or not self.attr.isidentifier():
            raise ValueError(f"Field attr must be an identifier, got {self.attr!r}")
        if self.name is None:
            object.__setattr__(self, "name", self.attr)
        elif not self.name:
            raise ValueError(f"Field {self.attr}: serialized name cannot be empty")
        object.__setattr__(self, "min_version", as_version(self.min_version))
        object.__setattr__(self, "max_version", as_version(self.max_version))

        if (
            self.min_version is not None
            and self.max_version is not None
            and self.min_version > self.max_version
        ):
            raise ValueError(
                f"Field {self.attr}: min_version {self.min_version} "
                f"exceeds max_version {self.max_version}"
            )
        if self.kind is Kind.RECORD and self.descriptor is None:
            raise ValueError(f"Field {self.attr}: RECORD fields need a descriptor")
        if self.descriptor is not None and self.kind not in (Kind.RECORD, Kind.LIST):
            raise ValueError(
                f"Field {self.attr}: only RECORD and LIST fields take a descriptor"
            )
        if self.decode is not None and not callable(self.decode):
            raise ValueError(f"Field {self.attr}: decode must be callable")

    @property
    def key(self) -> str:
        """Serialized name (always set after construction)."""
        return self.name or self.attr

    def visible_at(self, version: ApiVersion | None) -> bool:
        """Return True when the field exists at the given request version."""
        return version_allows(
            version,
            min_version=self.min_version,  # type: ignore[arg-type]
            max_version=self.max_version,  # type: ignore[arg-type]
        )

    def zero(self) -> Any:
        """Return the value a missing or null entry decodes to."""
        if self.kind is Kind.RECORD and self.descriptor is not None:
            return self.descriptor.zero()
        return _SCALAR_ZEROS.get(self.kind)


@dataclass(frozen=True)
class Component:
    """An embedded sub-record decoded from its parent's object."""

    attr: str
    descriptor: Descriptor[Any]

    def __post_init__(self) -> None:
        """Validate the attribute name."""
        if not self.attr or not self.attr.isidentifier():
            raise ValueError(
                f"Component attr must be an identifier, got {self.attr!r}"
            )


@dataclass(frozen=True)
class Descriptor[T]:
    """Field table and construction recipe for one record type.

    Attributes:
        name: Human-readable type name used in error paths.
        factory: Callable building the record from keyword arguments, one
            per field ``attr`` and component ``attr``.
        fields: Ordered field table.
        components: Embedded sub-records sharing the parent's JSON object.
        decoder: Optional hook receiving the raw JSON object and the request
            API version (or None); its return value replaces default
            decoding for this type.
    """

    name: str
    factory: Callable[..., T]
    fields: tuple[Field, ...] = ()
    components: tuple[Component, ...] = ()
    decoder: Callable[[Mapping[str, Any], ApiVersion | None], T] | None = None

    def __post_init__(self) -> None:
        """Freeze the tables and reject ambiguous definitions."""
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "components", tuple(self.components))

        if not callable(self.factory):
            raise ValueError(f"Descriptor {self.name}: factory must be callable")
        if self.decoder is not None and not callable(self.decoder):
            raise ValueError(f"Descriptor {self.name}: decoder must be callable")

        attrs = [f.attr for f in self.fields] + [c.attr for c in self.components]
        duplicates = sorted({a for a in attrs if attrs.count(a) > 1})
        if duplicates:
            raise ValueError(
                f"Descriptor {self.name}: duplicate attributes {duplicates}"
            )
        keys = [f.key for f in self.fields]
        duplicate_keys = sorted({k for k in keys if keys.count(k) > 1})
        if duplicate_keys:
            raise ValueError(
                f"Descriptor {self.name}: duplicate serialized names {duplicate_keys}"
            )

    def zero(self) -> T:
        """Build the record every field of which holds its zero value."""
        values: dict[str, Any] = {f.attr: f.zero() for f in self.fields}
        for component in self.components:
            values[component.attr] = component.descriptor.zero()
        return self.factory(**values)
