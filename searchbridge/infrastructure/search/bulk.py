# ==============================================================================
# Bulk Write Context
# ==============================================================================
"""
Batched writes to OpenSearch through the bulk API.

BulkContext holds one client and one BulkRequest. Items are mapped to write
requests and queued by receive(); flush() sends the whole batch as a single
bulk call. A bulk response that reports any failed item fails the flush and
leaves the batch untouched. Nothing is retried here.
"""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from opensearchpy import OpenSearch

from searchbridge.core.models import BulkRequest, WriteRequest
from searchbridge.infrastructure.search.opensearch import close_client

logger = logging.getLogger(__name__)

X = TypeVar("X")

OptionsFn = Callable[[BulkRequest], dict]
DestroyFn = Callable[[OpenSearch], None]


def default_options(bulk_request: BulkRequest) -> dict:
    """Send every bulk request with the client's default options."""
    return {}


class BulkWriteError(Exception):
    """
    Raised when the cluster rejects one or more items of a bulk request.

    Attributes:
        failures: The failed response items, each as {action: item_result}
    """

    def __init__(self, message: str, failures: list[dict]):
        super().__init__(message)
        self.failures = failures


def build_failure_message(items: list[dict]) -> str:
    """
    Describe every failed item of a bulk response.

    Args:
        items: The "items" list of a bulk response

    Returns:
        One line per failed item, prefixed by its position in the batch
    """
    lines = ["failure in bulk execution:"]
    for position, item in enumerate(items):
        for result in item.values():
            error = result.get("error")
            if error is None:
                continue
            reason = error.get("reason", error) if isinstance(error, dict) else error
            lines.append(
                f"[{position}]: index [{result.get('_index')}], "
                f"id [{result.get('_id')}], message [{reason}]"
            )
    return "\n".join(lines)


class BulkContext(Generic[X]):
    """
    Per-partition state of the bulk sink.

    Owns the client and the current batch. Must be driven by a single
    caller: receive() and flush() are not thread safe.
    """

    def __init__(
        self,
        client: OpenSearch,
        request_fn: Callable[[X], WriteRequest],
        bulk_request_supplier: Callable[[], BulkRequest] = BulkRequest,
        options_fn: OptionsFn = default_options,
        destroy_fn: DestroyFn = close_client,
    ):
        """
        Initialize the context.

        Args:
            client: Connected OpenSearch client
            request_fn: Maps a dataflow item to an index/update/delete request
            bulk_request_supplier: Builds an empty batch; called again after each flush
            options_fn: Returns extra client.bulk() arguments for a batch
            destroy_fn: Releases the client on close().
        """
        self._client = client
        self._request_fn = request_fn
        self._bulk_request_supplier = bulk_request_supplier
        self._options_fn = options_fn
        self._destroy_fn = destroy_fn
        self._closed = False

        self._bulk_request = bulk_request_supplier()

    @property
    def bulk_request(self) -> BulkRequest:
        """The batch queued since the last successful flush."""
        return self._bulk_request

    def receive(self, item: X) -> None:
        """Map an item to a write request and queue it."""
        self._bulk_request.add(self._request_fn(item))

    def flush(self) -> int:
        """
        Send the queued batch as one bulk request.

        Returns:
            Number of write requests sent

        Raises:
            BulkWriteError: If the cluster reports any failed item
        """
        count = len(self._bulk_request)
        if count == 0:
            return 0

        response = self._client.bulk(
            body=self._bulk_request.to_body(),
            **self._options_fn(self._bulk_request),
        )

        if response.get("errors"):
            items = response.get("items", [])
            failures = [item for item in items if any("error" in r for r in item.values())]
            raise BulkWriteError(build_failure_message(items), failures)

        logger.debug("Flushed %d write requests (took=%sms)", count, response.get("took"))
        self._bulk_request = self._bulk_request_supplier()
        return count

    def close(self) -> None:
        """Release the client. Later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        self._destroy_fn(self._client)
