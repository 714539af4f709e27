# ==============================================================================
# Searchbridge
# ==============================================================================
"""
OpenSearch connectors for Bytewax dataflows.

- OpenSearchSink: batches index/update/delete requests into bulk calls
- OpenSearchSource: drains a query page by page with the scroll API
"""

from searchbridge.connectors.bytewax import OpenSearchSink, OpenSearchSource
from searchbridge.core.models import (
    BulkRequest,
    DeleteRequest,
    IndexRequest,
    SearchRequest,
    UpdateRequest,
)
from searchbridge.infrastructure.search import BulkWriteError, build_client

__all__ = [
    "BulkRequest",
    "BulkWriteError",
    "DeleteRequest",
    "IndexRequest",
    "OpenSearchSink",
    "OpenSearchSource",
    "SearchRequest",
    "UpdateRequest",
    "build_client",
]
