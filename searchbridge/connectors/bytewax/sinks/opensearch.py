# ==============================================================================
# OpenSearch Sink for Bytewax
# ==============================================================================
"""
OpenSearch bulk sink for Bytewax dataflows.

Thin adapter around BulkContext. Every worker builds its own client and
batch. Each batch Bytewax hands to a partition is mapped item by item and
flushed as exactly one bulk request.
"""

import logging
from collections.abc import Callable
from functools import partial
from typing import List, Optional, TypeVar

from bytewax.outputs import DynamicSink, StatelessSinkPartition
from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConnectionError as OSConnectionError
from opensearchpy.exceptions import ConnectionTimeout

from searchbridge.core.models import BulkRequest, WriteRequest
from searchbridge.infrastructure.search import (
    BulkContext,
    BulkWriteError,
    build_client,
    close_client,
    default_options,
)
from searchbridge.infrastructure.search.bulk import DestroyFn, OptionsFn

logger = logging.getLogger(__name__)

X = TypeVar("X")


class _OpenSearchSinkPartition(StatelessSinkPartition[X]):
    """
    Partition handler for the OpenSearch sink.

    Queues each item of a batch, then flushes the batch in one bulk call.
    """

    def __init__(self, context: BulkContext[X], step_id: str, worker_index: int):
        """
        Initialize the partition.

        Args:
            context: Bulk context owning this worker's client
            step_id: Bytewax step ID (the sink name), used in logs
            worker_index: Index of this worker
        """
        self._context = context
        self._step_id = step_id
        self._worker_index = worker_index

    def write_batch(self, items: List[X]) -> None:
        """
        Write a batch of items to OpenSearch.

        Args:
            items: Dataflow items; each is mapped to one write request
        """
        if not items:
            return

        for item in items:
            self._context.receive(item)

        try:
            count = self._context.flush()
            logger.debug(
                "%s[%d]: flushed %d write requests", self._step_id, self._worker_index, count
            )

        except BulkWriteError as e:
            logger.error("%s[%d]: %s", self._step_id, self._worker_index, e)
            raise

        except (OSConnectionError, ConnectionTimeout) as e:
            logger.error(
                "%s[%d]: connection error during bulk: %s", self._step_id, self._worker_index, e
            )
            raise

    def close(self) -> None:
        """Release the client."""
        self._context.close()


class OpenSearchSink(DynamicSink[X]):
    """
    Bytewax sink that bulk-writes items to OpenSearch.

    The sink name is the step ID passed to op.output().

    Usage:
        sink = OpenSearchSink(
            client_supplier=lambda: build_client("admin", "admin", "localhost", 9200),
            request_fn=lambda doc: IndexRequest(index="docs", id=doc["id"], document=doc),
        )
        op.output("opensearch_out", stream, sink)
    """

    def __init__(
        self,
        client_supplier: Callable[[], OpenSearch],
        request_fn: Callable[[X], WriteRequest],
        bulk_request_supplier: Callable[[], BulkRequest] = BulkRequest,
        options_fn: OptionsFn = default_options,
        destroy_fn: DestroyFn = close_client,
    ):
        """
        Initialize the sink.

        Args:
            client_supplier: Builds a new client; called once per worker
            request_fn: Maps an item to an index/update/delete request
            bulk_request_supplier: Builds an empty batch
            options_fn: Returns extra client.bulk() arguments for a batch
            destroy_fn: Releases a worker's client when the dataflow ends
        """
        self._client_supplier = client_supplier
        self._request_fn = request_fn
        self._bulk_request_supplier = bulk_request_supplier
        self._options_fn = options_fn
        self._destroy_fn = destroy_fn

    @classmethod
    def from_credentials(
        cls,
        username: str,
        password: Optional[str],
        hostname: str,
        port: int,
        request_fn: Callable[[X], WriteRequest],
    ) -> "OpenSearchSink[X]":
        """
        Build a sink that connects with HTTP basic auth.

        Uses a fresh batch per flush, default bulk options, and closes the
        client when the dataflow ends.
        """
        return cls(partial(build_client, username, password, hostname, port), request_fn)

    def build(
        self, step_id: str, worker_index: int, worker_count: int
    ) -> _OpenSearchSinkPartition[X]:
        """
        Build a partition handler for this worker.

        Args:
            step_id: Unique step identifier
            worker_index: Index of this worker
            worker_count: Total number of workers

        Returns:
            Partition handler with its own client and batch
        """
        context = BulkContext(
            self._client_supplier(),
            self._request_fn,
            bulk_request_supplier=self._bulk_request_supplier,
            options_fn=self._options_fn,
            destroy_fn=self._destroy_fn,
        )
        logger.info("%s[%d/%d]: OpenSearch sink ready", step_id, worker_index, worker_count)
        return _OpenSearchSinkPartition(context, step_id, worker_index)
