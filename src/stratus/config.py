"""Configuration: Frozen Config with environment fallbacks."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from stratus.errors import ConfigurationError
from stratus.versions import ApiVersion, as_version

load_dotenv()

_ENDPOINT_ENV = "STRATUS_ENDPOINT"
_API_VERSION_ENV = "STRATUS_API_VERSION"
_AUTH_TOKEN_ENV = "STRATUS_AUTH_TOKEN"
_TIMEOUT_ENV = "STRATUS_TIMEOUT_S"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for a clustering service client.

    Unset fields are resolved from ``STRATUS_*`` environment variables
    (a ``.env`` file is honored).

    Example:
        config = Config(endpoint="https://cloud.example.com/clustering/v1")
        # Token resolved from STRATUS_AUTH_TOKEN when present
    """

    endpoint: str | None = None
    #: Sent as ``OpenStack-API-Version`` when set; ``None`` means server default.
    api_version: ApiVersion | str | None = None
    #: A pre-issued token, sent verbatim as ``X-Auth-Token``.
    auth_token: str | None = None
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        """Resolve environment fallbacks and validate."""
        endpoint = self.endpoint or os.environ.get(_ENDPOINT_ENV)
        if not endpoint or not endpoint.strip():
            raise ConfigurationError(
                "Clustering endpoint required",
                hint=f"Set {_ENDPOINT_ENV} or pass endpoint=...",
            )
        endpoint = endpoint.strip()
        if not endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Endpoint must be an http(s) URL, got {endpoint!r}",
                hint="Use the service catalog URL, e.g. https://host:8778/v1",
            )
        object.__setattr__(self, "endpoint", endpoint.rstrip("/") + "/")

        raw_version = self.api_version
        if raw_version is None:
            raw_version = os.environ.get(_API_VERSION_ENV)
        try:
            object.__setattr__(self, "api_version", as_version(raw_version))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid api_version: {raw_version!r}",
                hint="Use 'major.minor' (e.g. '1.10') or 'latest'.",
            ) from e

        if self.auth_token is None:
            object.__setattr__(self, "auth_token", os.environ.get(_AUTH_TOKEN_ENV))

        timeout = self.timeout_s
        if timeout is None:
            raw_timeout = os.environ.get(_TIMEOUT_ENV)
            try:
                timeout = float(raw_timeout) if raw_timeout else 30.0
            except ValueError as e:
                raise ConfigurationError(
                    f"{_TIMEOUT_ENV} must be a number, got {raw_timeout!r}"
                ) from e
        if timeout <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {timeout}",
                hint="This bounds each HTTP request in seconds.",
            )
        object.__setattr__(self, "timeout_s", float(timeout))

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(endpoint={self.endpoint!r}, api_version="
            f"{str(self.api_version) if self.api_version else None!r}, "
            f"auth_token={'[REDACTED]' if self.auth_token else None}, "
            f"timeout_s={self.timeout_s})"
        )

    __repr__ = __str__
