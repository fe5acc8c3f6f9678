"""API version tokens and the per-field version gate.

Versions are ``major.minor`` pairs compared numerically, so ``"2.10"`` sorts
after ``"2.9"``. The special token ``"latest"`` sorts after every numbered
version.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import TYPE_CHECKING

from stratus._http import API_VERSION_HEADERS

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"\s*(\d+)\.(\d+)\s*", re.ASCII)
_LATEST_COMPONENT = 2**31 - 1


@dataclass(frozen=True, order=True)
class ApiVersion:
    """A comparable ``major.minor`` API version."""

    major: int
    minor: int

    def __post_init__(self) -> None:
        """Reject negative components."""
        if self.major < 0 or self.minor < 0:
            raise ValueError(f"API version components must be >= 0, got {self}")

    @classmethod
    def parse(cls, value: str | ApiVersion) -> ApiVersion:
        """Parse ``"2.10"`` or ``"latest"`` into an ApiVersion."""
        if isinstance(value, ApiVersion):
            return value
        if not isinstance(value, str):
            raise TypeError(f"API version must be a string, got {type(value).__name__}")
        if value.strip().lower() == "latest":
            return LATEST
        m = _VERSION_RE.fullmatch(value)
        if m is None:
            raise ValueError(f"Invalid API version {value!r}; expected 'major.minor'")
        return cls(int(m.group(1)), int(m.group(2)))

    @property
    def is_latest(self) -> bool:
        return self.major == _LATEST_COMPONENT and self.minor == _LATEST_COMPONENT

    def __str__(self) -> str:
        if self.is_latest:
            return "latest"
        return f"{self.major}.{self.minor}"


LATEST = ApiVersion(_LATEST_COMPONENT, _LATEST_COMPONENT)


def as_version(value: ApiVersion | str | None) -> ApiVersion | None:
    """Normalize an optional version-like value; ``None`` and ``""`` mean unset."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return ApiVersion.parse(value)


def version_from_headers(headers: Mapping[str, str] | None) -> ApiVersion | None:
    """Return the API version announced by a response, if any.

    ``OpenStack-API-Version`` carries ``"<service> <version>"``; the legacy
    per-service headers carry the bare version. A malformed value is skipped
    as if the header were absent.
    """
    if not headers:
        return None
    lowered = {str(k).lower(): v for k, v in headers.items()}
    for name in API_VERSION_HEADERS:
        raw = lowered.get(name.lower())
        if raw is None or not str(raw).strip():
            continue
        try:
            return ApiVersion.parse(str(raw).split()[-1])
        except ValueError:
            logger.debug("Ignoring unparseable %s header: %r", name, raw)
    return None


def version_allows(
    request: ApiVersion | None,
    *,
    min_version: ApiVersion | None = None,
    max_version: ApiVersion | None = None,
) -> bool:
    """Return True when a field bounded by min/max is visible at ``request``.

    With no request version, fields that need a minimum version are hidden
    and fields bounded only from above are visible.
    """
    if request is None:
        return min_version is None
    if min_version is not None and request < min_version:
        return False
    return not (max_version is not None and request > max_version)
