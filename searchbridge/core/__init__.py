# ==============================================================================
# Core Domain Models
# ==============================================================================
"""
Pure domain models with no dependency on the search client.

This module contains:
- Write requests (IndexRequest, UpdateRequest, DeleteRequest) and the BulkRequest batch
- SearchRequest for scroll queries
"""

from searchbridge.core.models import (
    BulkRequest,
    DeleteRequest,
    IndexRequest,
    OpType,
    SearchRequest,
    UpdateRequest,
    WriteRequest,
)

__all__ = [
    "BulkRequest",
    "DeleteRequest",
    "IndexRequest",
    "OpType",
    "SearchRequest",
    "UpdateRequest",
    "WriteRequest",
]
