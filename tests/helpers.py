"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: one scriptable fake endpoint serves
client, pager and resource tests alike.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Callable

TEST_ENDPOINT = "http://clustering.test/v1/"
TEST_TOKEN = "tok-3f9a"


@dataclass
class FakeService:
    """``httpx.MockTransport`` handler with per-route canned responses.

    Routes match on method plus path, or on method plus path-and-query when
    registered with a ``?``. Unknown routes answer 404.
    """

    routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = (
        field(default_factory=dict)
    )
    requests: list[httpx.Request] = field(default_factory=list)

    def add(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        status: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> None:
        def _respond(_request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content, headers=headers)
            if json_body is None:
                return httpx.Response(status, headers=headers)
            return httpx.Response(status, json=json_body, headers=headers)

        self.routes[(method.upper(), path)] = _respond

    def add_handler(
        self,
        method: str,
        path: str,
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> None:
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        full = request.url.raw_path.decode("ascii")
        route = self.routes.get((request.method, full)) or self.routes.get(
            (request.method, request.url.path)
        )
        if route is None:
            return httpx.Response(
                404, json={"error": {"message": f"no route for {full}"}}
            )
        return route(request)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)
