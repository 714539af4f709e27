# ==============================================================================
# Scroll Search Context
# ==============================================================================
"""
Page-by-page reads from OpenSearch using the scroll API.

ScrollContext runs one query, then hands out one page per fill_buffer() call
until the cluster returns an empty page. The scroll cursor is cleared when
the context is closed, whether or not the results were exhausted.

Lifecycle:
    CREATED -> OPENED -> EXHAUSTED -> CLOSED
CLOSED is reachable from every state.
"""

import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Generic, Optional, TypeVar

from opensearchpy import OpenSearch

from searchbridge.core.models import SearchRequest
from searchbridge.infrastructure.search.opensearch import close_client
from searchbridge.utils.config import DEFAULT_SCROLL_TIMEOUT

logger = logging.getLogger(__name__)

T = TypeVar("T")

DestroyFn = Callable[[OpenSearch], None]


def hit_source_as_string(hit: dict) -> Optional[str]:
    """Map a search hit to the JSON text of its _source, or None if absent."""
    source = hit.get("_source")
    if source is None:
        return None
    return json.dumps(source, ensure_ascii=False)


class ScrollState(str, Enum):
    """Lifecycle states of a ScrollContext."""

    CREATED = "created"
    OPENED = "opened"
    EXHAUSTED = "exhausted"
    CLOSED = "closed"


class ScrollContext(Generic[T]):
    """
    Per-partition state of the scroll source.

    Owns the client and the scroll cursor. Must be driven by a single
    caller.
    """

    def __init__(
        self,
        client: OpenSearch,
        map_hit_fn: Callable[[dict], Optional[T]],
        scroll_timeout: str = DEFAULT_SCROLL_TIMEOUT,
        destroy_fn: DestroyFn = close_client,
    ):
        """
        Initialize the context. No request is made until open().

        Args:
            client: Connected OpenSearch client
            map_hit_fn: Maps a raw hit to an output item; None drops the hit
            scroll_timeout: How long the cluster keeps the cursor between pages
            destroy_fn: Releases the client on close()
        """
        self._client = client
        self._map_hit_fn = map_hit_fn
        self._scroll_timeout = scroll_timeout
        self._destroy_fn = destroy_fn

        self._state = ScrollState.CREATED
        self._scroll_id: Optional[str] = None
        self._hits: list[dict] = []

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def exhausted(self) -> bool:
        return self._state is ScrollState.EXHAUSTED

    @property
    def scroll_id(self) -> Optional[str]:
        return self._scroll_id

    def _accept(self, response: dict) -> None:
        # The cluster may hand out a new cursor with every page
        self._scroll_id = response.get("_scroll_id", self._scroll_id)
        self._hits = response.get("hits", {}).get("hits") or []

    def open(self, search_request: SearchRequest) -> None:
        """Run the initial query and keep its first page."""
        if self._state is not ScrollState.CREATED:
            raise RuntimeError(f"Cannot open scroll context in state '{self._state.value}'")

        response = self._client.search(**search_request.to_search_kwargs(self._scroll_timeout))
        self._accept(response)
        self._state = ScrollState.OPENED

        logger.debug(
            "Opened scroll (index=%s, first_page=%d hits, keep_alive=%s)",
            search_request.index,
            len(self._hits),
            self._scroll_timeout,
        )

    def fill_buffer(self, buffer: list) -> None:
        """
        Append the current page to buffer and fetch the next page.

        An empty current page marks the context exhausted instead; nothing
        is appended and no further request is made.

        Args:
            buffer: Receives the mapped items of the current page
        """
        if self._state is ScrollState.EXHAUSTED:
            return
        if self._state is not ScrollState.OPENED:
            raise RuntimeError(f"Cannot read from scroll context in state '{self._state.value}'")

        if not self._hits:
            self._state = ScrollState.EXHAUSTED
            logger.debug("Scroll exhausted (scroll_id=%s)", self._scroll_id)
            return

        for hit in self._hits:
            item = self._map_hit_fn(hit)
            if item is not None:
                buffer.append(item)

        response = self._client.scroll(scroll_id=self._scroll_id, scroll=self._scroll_timeout)
        self._accept(response)

    def close(self) -> None:
        """
        Clear the scroll cursor, then release the client.

        A failure clearing the cursor is logged and does not stop the
        client teardown. Later calls do nothing.
        """
        if self._state is ScrollState.CLOSED:
            return
        self._state = ScrollState.CLOSED

        try:
            if self._scroll_id is not None:
                self._client.clear_scroll(scroll_id=self._scroll_id)
        except Exception as e:
            logger.warning("Failed to clear scroll %s: %s", self._scroll_id, e)
        finally:
            self._hits = []
            self._destroy_fn(self._client)
