"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, and a factory for
service clients backed by ``httpx.MockTransport``. Environment fixtures are
autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os
from typing import TYPE_CHECKING

import httpx
import pytest

from stratus.client import ServiceClient
from tests.helpers import TEST_ENDPOINT, TEST_TOKEN, FakeService

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_stratus_env(request, monkeypatch):
    """Clear STRATUS_* variables so host settings never leak into tests.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("STRATUS_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Service doubles
# =============================================================================


@pytest.fixture
def fake_service() -> FakeService:
    """A scriptable in-memory clustering endpoint."""
    return FakeService()


@pytest.fixture
def make_client(
    fake_service: FakeService,
) -> Iterator[Callable[..., ServiceClient]]:
    """Return a factory for clients wired to ``fake_service``."""
    clients: list[ServiceClient] = []

    def _make(api_version: str | None = None) -> ServiceClient:
        http = httpx.Client(
            base_url=TEST_ENDPOINT,
            headers={"X-Auth-Token": TEST_TOKEN},
            transport=httpx.MockTransport(fake_service),
        )
        client = ServiceClient(http, api_version=api_version)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client: Callable[..., ServiceClient]) -> ServiceClient:
    """Client with no API version pinned."""
    return make_client()
