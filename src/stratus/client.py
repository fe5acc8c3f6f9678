"""Service client: the thin request/response seam over ``httpx``.

Transport, connection pooling and TLS are left to the ``httpx.Client`` the
caller supplies (or the one built from `Config`). This module only joins
resource paths onto the endpoint, attaches the API version header, parses
JSON bodies into `Result`s and maps failures onto `APIError`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Self

import httpx

from stratus._http import (
    AUTH_TOKEN_HEADER,
    CLUSTERING_SERVICE_TYPE,
    RETRYABLE_STATUS_CODES,
)
from stratus.errors import APIError
from stratus.result import Result
from stratus.versions import ApiVersion, as_version

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType

    from stratus.config import Config

logger = logging.getLogger(__name__)

_STATUS_HINTS = {
    401: "Check that the auth token is valid and not expired.",
    403: "Check the project's role assignments for the clustering service.",
    404: "Check the resource ID and the endpoint's API prefix.",
}


class ServiceClient:
    """Issue requests against one service endpoint and wrap the replies."""

    def __init__(
        self,
        http: httpx.Client,
        *,
        api_version: ApiVersion | str | None = None,
        service_type: str = CLUSTERING_SERVICE_TYPE,
    ) -> None:
        """Wrap a configured ``httpx.Client`` (base URL and auth included)."""
        self._http = http
        self.api_version = as_version(api_version)
        self.service_type = service_type

    @classmethod
    def from_config(
        cls, config: Config, *, transport: httpx.BaseTransport | None = None
    ) -> ServiceClient:
        """Build a client (and its ``httpx.Client``) from a `Config`."""
        headers = {"Accept": "application/json"}
        if config.auth_token:
            headers[AUTH_TOKEN_HEADER] = config.auth_token
        http = httpx.Client(
            base_url=config.endpoint or "",
            headers=headers,
            timeout=config.timeout_s,
            transport=transport,
        )
        return cls(http, api_version=config.api_version)

    def url_for(self, path: str) -> str:
        """Resolve a path (or absolute link) against the endpoint."""
        return str(self._http.base_url.join(path))

    # --- Verbs ---

    def get(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        ok_statuses: Iterable[int] | None = None,
    ) -> Result:
        return self.request("GET", path, params=params, ok_statuses=ok_statuses)

    def post(
        self,
        path: str,
        *,
        json_body: Any = None,
        ok_statuses: Iterable[int] | None = None,
    ) -> Result:
        return self.request("POST", path, json_body=json_body, ok_statuses=ok_statuses)

    def patch(
        self,
        path: str,
        *,
        json_body: Any = None,
        ok_statuses: Iterable[int] | None = None,
    ) -> Result:
        return self.request(
            "PATCH", path, json_body=json_body, ok_statuses=ok_statuses
        )

    def delete(
        self, path: str, *, ok_statuses: Iterable[int] | None = None
    ) -> Result:
        return self.request("DELETE", path, ok_statuses=ok_statuses)

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
        ok_statuses: Iterable[int] | None = None,
    ) -> Result:
        """Send one request and return its decoded `Result`.

        Raises:
            APIError: On transport failures, unexpected status codes, or a
                body that is not valid JSON.
        """
        headers: dict[str, str] = {}
        if self.api_version is not None:
            headers["OpenStack-API-Version"] = (
                f"{self.service_type} {self.api_version}"
            )

        try:
            response = self._http.request(
                method,
                path,
                json=json_body,
                params=dict(params) if params else None,
                headers=headers,
            )
        except httpx.RequestError as e:
            raise APIError(
                f"{method} {path} failed: {e}",
                retryable=True,
                method=method,
                url=str(e.request.url) if _has_request(e) else path,
            ) from e

        url = str(response.request.url)
        logger.debug("%s %s -> %s", method, url, response.status_code)

        allowed = set(ok_statuses) if ok_statuses is not None else None
        if (allowed is not None and response.status_code not in allowed) or (
            allowed is None and not response.is_success
        ):
            raise _status_error(response, method=method, url=url)

        body = _parse_body(response, method=method, url=url)
        return Result(body=body, headers=dict(response.headers), url=url)

    # --- Lifecycle ---

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _has_request(exc: httpx.RequestError) -> bool:
    # ``.request`` raises RuntimeError when the error was built without one.
    try:
        exc.request  # noqa: B018
    except RuntimeError:
        return False
    return True


def _parse_body(response: httpx.Response, *, method: str, url: str) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise APIError(
            f"{method} {url} returned a body that is not valid JSON",
            status_code=response.status_code,
            retryable=False,
            method=method,
            url=url,
        ) from e


def _status_error(response: httpx.Response, *, method: str, url: str) -> APIError:
    status = response.status_code
    detail = _error_detail(response)
    message = f"{method} {url} returned {status}"
    if detail:
        message = f"{message}: {detail}"
    return APIError(
        message,
        hint=_STATUS_HINTS.get(status),
        retryable=status in RETRYABLE_STATUS_CODES,
        status_code=status,
        method=method,
        url=url,
    )


def _error_detail(response: httpx.Response) -> str | None:
    """Pull a human-readable message out of an error body, if there is one."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        text = response.text.strip()
        return text or None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        for key in ("message", "explanation", "title"):
            if isinstance(body.get(key), str):
                return body[key]
    return None
