"""Small HTTP-related constants shared across Stratus.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

# Status codes a caller may reasonably retry.
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 409, 429, 500, 502, 503, 504})

# Checked in order; the first header present wins.
API_VERSION_HEADERS: tuple[str, ...] = (
    "OpenStack-API-Version",
    "X-OpenStack-Nova-API-Version",
    "X-OpenStack-Senlin-API-Version",
)

REQUEST_ID_HEADER = "X-OpenStack-Request-Id"
AUTH_TOKEN_HEADER = "X-Auth-Token"

CLUSTERING_SERVICE_TYPE = "clustering"
