"""Decoded API responses and typed extraction from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stratus._http import REQUEST_ID_HEADER
from stratus.projector import (
    decode_into,
    decode_slice_into,
    project_slice_to_map,
    project_to_map,
)
from stratus.versions import version_from_headers

if TYPE_CHECKING:
    from collections.abc import Mapping

    from stratus.descriptors import Descriptor
    from stratus.versions import ApiVersion


@dataclass(frozen=True)
class Result:
    """A decoded response body together with its headers.

    ``body`` is the parsed JSON document (or ``None`` for empty responses).
    The API version announced in the headers gates which fields the
    ``extract_*`` helpers decode and project.

    Example:
        result = client.get("servers/1")
        server = result.extract_into(SERVER, "server")
        as_map = result.extract_into_map(server, SERVER)
    """

    body: Any = None
    headers: Mapping[str, str] | None = field(default_factory=dict)
    #: Final request URL, query string included, when known.
    url: str | None = None

    @property
    def api_version(self) -> ApiVersion | None:
        """API version from the response headers, or None when absent."""
        return version_from_headers(self.headers)

    @property
    def request_id(self) -> str | None:
        """Server-assigned request identifier, when present."""
        wanted = REQUEST_ID_HEADER.lower()
        for name, value in (self.headers or {}).items():
            if str(name).lower() == wanted:
                return value
        return None

    def extract_into[T](self, descriptor: Descriptor[T], key: str | None) -> T:
        """Decode the object under ``key`` into a record."""
        return decode_into(self.body, key, descriptor, api_version=self.api_version)

    def extract_slice_into[T](
        self, descriptor: Descriptor[T], key: str | None
    ) -> list[T]:
        """Decode the array under ``key`` into records."""
        return decode_slice_into(
            self.body, key, descriptor, api_version=self.api_version
        )

    def extract_into_map(
        self, value: Any, descriptor: Descriptor[Any]
    ) -> dict[str, Any] | list[dict[str, Any]]:
        """Project a record, or a list of records, into plain maps."""
        if isinstance(value, list | tuple):
            return project_slice_to_map(value, descriptor, self.api_version)
        return project_to_map(value, descriptor, self.api_version)
