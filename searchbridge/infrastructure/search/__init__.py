# ==============================================================================
# Search Engine Adapters
# ==============================================================================
"""
OpenSearch client helpers plus the bulk-write and scroll-read contexts that the
dataflow connectors wrap.
"""

from searchbridge.infrastructure.search.bulk import (
    BulkContext,
    BulkWriteError,
    build_failure_message,
    default_options,
)
from searchbridge.infrastructure.search.opensearch import (
    build_client,
    check_opensearch_connection,
    client_from_settings,
    close_client,
    wait_for_cluster,
)
from searchbridge.infrastructure.search.scroll import (
    ScrollContext,
    ScrollState,
    hit_source_as_string,
)

__all__ = [
    "BulkContext",
    "BulkWriteError",
    "ScrollContext",
    "ScrollState",
    "build_client",
    "build_failure_message",
    "check_opensearch_connection",
    "client_from_settings",
    "close_client",
    "default_options",
    "hit_source_as_string",
    "wait_for_cluster",
]
