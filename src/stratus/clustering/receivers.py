"""Clustering receivers: webhook and message triggers bound to a cluster.

Each operation takes a `ServiceClient` whose endpoint is the clustering
service root (e.g. ``https://host:8778/v1/``) and returns typed records
decoded through the shared projector. Timestamps are strict: a numeric or
malformed ``created_at``/``updated_at`` fails the call, and ``null``
decodes to `ZERO_TIME`.

Example:
    ```python
    client = ServiceClient.from_config(Config())
    receiver = receivers.create(
        client,
        receivers.CreateOpts(
            name="cluster_inflate",
            cluster_id="ae63a10b",
            type="webhook",
            action="CLUSTER_SCALE_OUT",
        ),
    )
    for page in receivers.list_receivers(client, receivers.ListOpts(limit=2)):
        print(receivers.extract_receivers(page))
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field as ModelField

from stratus.descriptors import ZERO_TIME, Descriptor, Field, Kind
from stratus.pagination import Page, Pager

if TYPE_CHECKING:
    from stratus.client import ServiceClient

ReceiverType = Literal["webhook", "message"]

_COLLECTION = "receivers"


# --- Records ---


@dataclass
class Receiver:
    """A receiver as reported by the clustering service."""

    action: str = ""
    actor: dict[str, Any] | None = None
    channel: dict[str, Any] | None = None
    cluster: str = ""
    created_at: datetime = ZERO_TIME
    domain: str = ""
    id: str = ""
    name: str = ""
    params: dict[str, Any] | None = None
    project: str = ""
    type: str = ""
    updated_at: datetime = ZERO_TIME
    user: str = ""


RECEIVER: Descriptor[Receiver] = Descriptor(
    name="receiver",
    factory=Receiver,
    fields=(
        Field("action", kind=Kind.STRING),
        Field("actor", kind=Kind.MAPPING),
        Field("channel", kind=Kind.MAPPING),
        Field("cluster", "cluster_id", kind=Kind.STRING),
        Field("created_at", kind=Kind.TIMESTAMP),
        Field("domain", kind=Kind.STRING),
        Field("id", kind=Kind.STRING),
        Field("name", kind=Kind.STRING),
        Field("params", kind=Kind.MAPPING),
        Field("project", kind=Kind.STRING),
        Field("type", kind=Kind.STRING),
        Field("updated_at", kind=Kind.TIMESTAMP),
        Field("user", kind=Kind.STRING),
    ),
)


# --- Request options ---


class CreateOpts(BaseModel):
    """Body of a create request."""

    model_config = ConfigDict(extra="forbid")

    name: str = ModelField(min_length=1)
    type: ReceiverType
    cluster_id: str | None = None
    action: str | None = None
    actor: dict[str, Any] | None = None
    params: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        return {"receiver": self.model_dump(exclude_none=True)}


class UpdateOpts(BaseModel):
    """Body of an update request; unset fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = ModelField(default=None, min_length=1)
    action: str | None = None
    params: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        return {"receiver": self.model_dump(exclude_none=True)}


class ListOpts(BaseModel):
    """Query filters, sorting and paging for list requests."""

    model_config = ConfigDict(extra="forbid")

    limit: int | None = ModelField(default=None, ge=1)
    marker: str | None = None
    #: Comma-separated ``key[:dir]`` pairs, e.g. ``"name:asc,status:desc"``.
    sort: str | None = None
    global_project: bool | None = None
    name: str | None = None
    type: ReceiverType | None = None
    cluster_id: str | None = None
    action: str | None = None
    user: str | None = None

    def to_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        for key, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, bool):
                query[key] = "true" if value else "false"
            else:
                query[key] = str(value)
        return query


# --- Pages ---


class ReceiverPage(Page):
    """One page of a receivers listing."""

    def is_empty(self) -> bool:
        return len(extract_receivers(self)) == 0


def extract_receivers(page: Page) -> list[Receiver]:
    """Decode the receivers held by a list page."""
    return page.result.extract_slice_into(RECEIVER, _COLLECTION)


# --- Operations ---


def create(client: ServiceClient, opts: CreateOpts) -> Receiver:
    """Create a receiver and return it as reported by the service."""
    result = client.post(
        _COLLECTION, json_body=opts.to_body(), ok_statuses=(200, 201, 202)
    )
    return result.extract_into(RECEIVER, "receiver")


def get(client: ServiceClient, receiver_id: str) -> Receiver:
    """Fetch one receiver by ID or name."""
    result = client.get(_resource_path(receiver_id), ok_statuses=(200,))
    return result.extract_into(RECEIVER, "receiver")


def update(client: ServiceClient, receiver_id: str, opts: UpdateOpts) -> Receiver:
    result = client.patch(
        _resource_path(receiver_id), json_body=opts.to_body(), ok_statuses=(200, 201)
    )
    return result.extract_into(RECEIVER, "receiver")


def delete(client: ServiceClient, receiver_id: str) -> None:
    client.delete(_resource_path(receiver_id), ok_statuses=(204,))


def list_receivers(
    client: ServiceClient, opts: ListOpts | None = None
) -> Pager[ReceiverPage]:
    """Return a pager over receivers matching ``opts``.

    Nothing is fetched until the pager is iterated.
    """
    params = opts.to_query() if opts is not None else None
    return Pager(client, _COLLECTION, ReceiverPage, params=params)


def notify(client: ServiceClient, receiver_id: str) -> str | None:
    """Trigger a message-type receiver; returns the server request ID."""
    result = client.post(f"{_resource_path(receiver_id)}/notify", ok_statuses=(204,))
    return result.request_id


def _resource_path(receiver_id: str) -> str:
    if not receiver_id or not receiver_id.strip():
        raise ValueError("receiver_id cannot be empty")
    return f"{_COLLECTION}/{quote(receiver_id, safe='')}"
