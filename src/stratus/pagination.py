"""Linked-page iteration for list endpoints.

A list endpoint returns one page per request; the page may carry a
``{"rel": "next", "href": ...}`` link pointing at the following page.
`Pager` walks those links in order and hands each page to the caller.
Every page is checked with `Page.is_empty` before the caller sees it, so a
page whose records fail to decode aborts the walk without being delivered.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from stratus.client import ServiceClient
    from stratus.result import Result

logger = logging.getLogger(__name__)


class Page(ABC):
    """One fetched page of a list endpoint.

    Subclasses implement `is_empty`, usually by extracting their records.
    """

    #: Keys leading from the body root to the list of links.
    link_path: ClassVar[tuple[str, ...]] = ("links",)

    def __init__(self, result: Result, url: str) -> None:
        self.result = result
        self.url = url

    @property
    def body(self) -> Any:
        return self.result.body

    @abstractmethod
    def is_empty(self) -> bool:
        """Return True when the page holds no records."""

    def next_page_url(self) -> str | None:
        """Return the ``rel="next"`` href, or None on the last page."""
        node: Any = self.body
        for key in self.link_path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        if not isinstance(node, list):
            return None
        for link in node:
            if isinstance(link, dict) and link.get("rel") == "next":
                href = link.get("href")
                if isinstance(href, str) and href:
                    return href
        return None


class Pager[P: Page]:
    """Sequential iterator over the pages of one list request."""

    def __init__(
        self,
        client: ServiceClient,
        url: str,
        page_type: type[P],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self._client = client
        self.url = url
        self.page_type = page_type
        self.params = dict(params) if params else None

    def __iter__(self) -> Iterator[P]:
        url: str | None = self.url
        params = self.params
        visited: set[str] = set()
        count = 0
        while url is not None:
            result = self._client.get(url, params=params)
            page = self.page_type(result, url)
            if page.is_empty():
                return
            count += 1
            logger.debug("Fetched page %d from %s", count, url)
            yield page

            visited.add(result.url or self._client.url_for(url))
            next_url = page.next_page_url()
            if next_url is not None and self._client.url_for(next_url) in visited:
                logger.debug("Stopping at repeated next link %s", next_url)
                return
            url = next_url
            # The next link carries its own query string.
            params = None

    def each_page(self, handler: Callable[[P], bool]) -> None:
        """Call ``handler`` for each page until it returns False.

        Errors raised while fetching or checking a page propagate unchanged.
        """
        for page in self:
            if not handler(page):
                return

    def all_pages(self) -> list[P]:
        """Fetch and return every page."""
        return list(self)
