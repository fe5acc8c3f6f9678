"""Receiver response bodies and their expected decoded records."""

from __future__ import annotations

from copy import deepcopy
from datetime import UTC, datetime
from typing import Any

from stratus.clustering.receivers import Receiver
from stratus.descriptors import ZERO_TIME

RECEIVER_ID = "573aa1ba-bf45-49fd-907d-6b5d6e6adfd3"
CLUSTER_ID = "ae63a10b-4a90-452c-aef1-113a0b255ee3"
ALARM_URL = (
    "http://node1:8778/v1/webhooks/e03dd2e5-8f2e-4ec1-8c6a-74ba891e5422"
    "/trigger?V=1&count=1"
)

_BASE: dict[str, Any] = {
    "action": "CLUSTER_SCALE_OUT",
    "actor": {"trust_id": ["6dc6d336e3fc4c0a951b5698cd1236d9"]},
    "channel": {"alarm_url": ALARM_URL},
    "cluster_id": CLUSTER_ID,
    "created_at": "2015-11-04T05:21:41Z",
    "domain": "Default",
    "id": RECEIVER_ID,
    "name": "cluster_inflate",
    "params": {"count": "1"},
    "project": "6e18cc2bdbeb48a5b3cad2dc499f6804",
    "type": "webhook",
    "updated_at": "2016-11-04T05:21:41Z",
    "user": "b4ad2d6e18cc2b9c48049f6dbe8a5b3c",
}


def receiver_doc(**overrides: Any) -> dict[str, Any]:
    """One receiver object with selected fields replaced."""
    doc = deepcopy(_BASE)
    doc.update(overrides)
    return doc


def expected_receiver(**overrides: Any) -> Receiver:
    values: dict[str, Any] = {
        "action": "CLUSTER_SCALE_OUT",
        "actor": {"trust_id": ["6dc6d336e3fc4c0a951b5698cd1236d9"]},
        "channel": {"alarm_url": ALARM_URL},
        "cluster": CLUSTER_ID,
        "created_at": datetime(2015, 11, 4, 5, 21, 41, tzinfo=UTC),
        "domain": "Default",
        "id": RECEIVER_ID,
        "name": "cluster_inflate",
        "params": {"count": "1"},
        "project": "6e18cc2bdbeb48a5b3cad2dc499f6804",
        "type": "webhook",
        "updated_at": datetime(2016, 11, 4, 5, 21, 41, tzinfo=UTC),
        "user": "b4ad2d6e18cc2b9c48049f6dbe8a5b3c",
    }
    values.update(overrides)
    return Receiver(**values)


# Shapes that must fail timestamp decoding.
INVALID_TIMESTAMPS: list[Any] = [123456789.0, "invalid", 1446614501, True]

NULL_UPDATED_AT = {
    "created_at": "2015-06-27T05:09:43Z",
    "updated_at": None,
}
NULL_UPDATED_AT_EXPECTED = {
    "created_at": datetime(2015, 6, 27, 5, 9, 43, tzinfo=UTC),
    "updated_at": ZERO_TIME,
}
