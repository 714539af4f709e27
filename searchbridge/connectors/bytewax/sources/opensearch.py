# ==============================================================================
# OpenSearch Scroll Source for Bytewax
# ==============================================================================
"""
Bounded Bytewax source that drains an OpenSearch query with the scroll API.

The source has a single partition, so the query runs once per dataflow no
matter how many workers there are. Each next_batch() call emits one scroll
page; the partition ends when the cluster returns an empty page.

Resume state is not tracked: a scroll cursor does not survive a restart, so
a resumed dataflow runs the query again from the beginning.
"""

import logging
from collections.abc import Callable
from functools import partial
from typing import Any, List, Optional, TypeVar

from bytewax.inputs import FixedPartitionedSource, StatefulSourcePartition
from opensearchpy import OpenSearch

from searchbridge.core.models import SearchRequest
from searchbridge.infrastructure.search import (
    ScrollContext,
    build_client,
    close_client,
    hit_source_as_string,
)
from searchbridge.infrastructure.search.scroll import DestroyFn
from searchbridge.utils.config import DEFAULT_SCROLL_TIMEOUT

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCROLL_PARTITION = "scroll"


class _OpenSearchSourcePartition(StatefulSourcePartition[T, None]):
    """Partition handler that emits one scroll page per batch."""

    def __init__(self, context: ScrollContext[T], step_id: str):
        self._context = context
        self._step_id = step_id
        self._emitted = 0

    def next_batch(self) -> List[T]:
        """
        Emit the current scroll page and fetch the next one.

        Returns:
            Mapped items of the page (may be empty if every hit was dropped)

        Raises:
            StopIteration: When the cluster returned an empty page
        """
        batch: List[T] = []
        self._context.fill_buffer(batch)

        if self._context.exhausted:
            logger.info("%s: scroll finished after %d items", self._step_id, self._emitted)
            raise StopIteration()

        self._emitted += len(batch)
        return batch

    def snapshot(self) -> None:
        return None

    def close(self) -> None:
        """Clear the scroll cursor and release the client."""
        self._context.close()


class OpenSearchSource(FixedPartitionedSource[T, None]):
    """
    Bytewax source that emits every hit of an OpenSearch query.

    The source name is the step ID passed to op.input().

    Usage:
        source = OpenSearchSource(
            client_supplier=lambda: build_client("admin", "admin", "localhost", 9200),
            search_request_supplier=lambda: SearchRequest(
                index="docs", body={"query": {"match_all": {}}}, size=500
            ),
        )
        stream = op.input("opensearch_in", flow, source)
    """

    def __init__(
        self,
        client_supplier: Callable[[], OpenSearch],
        search_request_supplier: Callable[[], SearchRequest],
        scroll_timeout: str = DEFAULT_SCROLL_TIMEOUT,
        map_hit_fn: Callable[[dict], Optional[Any]] = hit_source_as_string,
        destroy_fn: DestroyFn = close_client,
    ):
        """
        Initialize the source.

        Args:
            client_supplier: Builds a new client when the partition is built
            search_request_supplier: Builds the initial query
            scroll_timeout: Cursor keep-alive between pages (e.g. "60s")
            map_hit_fn: Maps a raw hit to an output item; None drops the hit.
                Defaults to the JSON text of the hit's _source.
            destroy_fn: Releases the client when the partition closes
        """
        self._client_supplier = client_supplier
        self._search_request_supplier = search_request_supplier
        self._scroll_timeout = scroll_timeout
        self._map_hit_fn = map_hit_fn
        self._destroy_fn = destroy_fn

    @classmethod
    def from_credentials(
        cls,
        username: str,
        password: Optional[str],
        hostname: str,
        port: int,
        search_request_supplier: Callable[[], SearchRequest],
    ) -> "OpenSearchSource[str]":
        """
        Build a source that connects with HTTP basic auth.

        Emits each hit's _source as a JSON string and closes the client when
        the partition closes.
        """
        return cls(
            partial(build_client, username, password, hostname, port),
            search_request_supplier,
        )

    def list_parts(self) -> List[str]:
        """A scroll is a single cursor, so there is exactly one partition."""
        return [SCROLL_PARTITION]

    def build_part(
        self, step_id: str, for_part: str, resume_state: None
    ) -> _OpenSearchSourcePartition[T]:
        """
        Build the partition handler and run the initial query.

        Args:
            step_id: Unique step identifier
            for_part: Partition identifier (always "scroll")
            resume_state: Ignored; the query always restarts

        Returns:
            Partition handler with an open scroll
        """
        assert for_part == SCROLL_PARTITION, f"Unknown partition {for_part!r}"

        context: ScrollContext[T] = ScrollContext(
            self._client_supplier(),
            self._map_hit_fn,
            scroll_timeout=self._scroll_timeout,
            destroy_fn=self._destroy_fn,
        )
        try:
            context.open(self._search_request_supplier())
        except Exception as e:
            logger.error("%s: failed to open scroll: %s", step_id, e)
            context.close()
            raise

        return _OpenSearchSourcePartition(context, step_id)
