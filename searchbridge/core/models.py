# ==============================================================================
# Searchbridge Domain Models
# ==============================================================================
"""
Pydantic models for bulk write requests and scroll searches.

These models are used for:
- Describing a single index/update/delete operation produced from a dataflow item
- Accumulating operations into one bulk request body
- Describing the initial query of a scroll search

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class OpType(str, Enum):
    """Bulk action types."""

    INDEX = "index"
    UPDATE = "update"
    DELETE = "delete"


class _DocWriteRequest(BaseModel):
    """
    Fields shared by every bulk action.

    Attributes:
        index: Target index name
        id: Document ID (optional for index, where the cluster assigns one)
        routing: Custom shard routing value
    """

    index: str = Field(..., description="Target index")
    id: Optional[Union[str, int]] = Field(None, description="Document ID")
    routing: Optional[str] = Field(None, description="Shard routing value")

    def _metadata(self) -> dict:
        meta: dict[str, Any] = {"_index": self.index}
        if self.id is not None:
            meta["_id"] = str(self.id)
        if self.routing is not None:
            meta["routing"] = self.routing
        return meta


class IndexRequest(_DocWriteRequest):
    """Create or replace a whole document."""

    op: Literal["index"] = "index"
    document: dict[str, Any] = Field(..., description="Document source")

    def to_bulk_lines(self) -> list[dict]:
        """Render as bulk body lines (action line, source line)."""
        return [{OpType.INDEX.value: self._metadata()}, self.document]


class UpdateRequest(_DocWriteRequest):
    """Partially update a document, optionally inserting it when missing."""

    op: Literal["update"] = "update"
    id: Union[str, int] = Field(..., description="Document ID")
    document: dict[str, Any] = Field(..., description="Partial document")
    doc_as_upsert: bool = Field(False, description="Insert the partial document if missing")

    def to_bulk_lines(self) -> list[dict]:
        """Render as bulk body lines (action line, partial doc line)."""
        body: dict[str, Any] = {"doc": self.document}
        if self.doc_as_upsert:
            body["doc_as_upsert"] = True
        return [{OpType.UPDATE.value: self._metadata()}, body]


class DeleteRequest(_DocWriteRequest):
    """Delete a document by ID."""

    op: Literal["delete"] = "delete"
    id: Union[str, int] = Field(..., description="Document ID")

    def to_bulk_lines(self) -> list[dict]:
        """Render as a single bulk action line."""
        return [{OpType.DELETE.value: self._metadata()}]


WriteRequest = Annotated[
    Union[IndexRequest, UpdateRequest, DeleteRequest],
    Field(discriminator="op"),
]


class BulkRequest(BaseModel):
    """
    An ordered batch of write requests sent as one bulk call.

    Owned by a single sink partition between two flushes.
    """

    requests: list[WriteRequest] = Field(default_factory=list)

    def add(self, request: WriteRequest) -> None:
        """Append a write request to the batch."""
        self.requests.append(request)

    def to_body(self) -> list[dict]:
        """Flatten the batch into bulk API body lines, preserving order."""
        body: list[dict] = []
        for request in self.requests:
            body.extend(request.to_bulk_lines())
        return body

    def __len__(self) -> int:
        return len(self.requests)


class SearchRequest(BaseModel):
    """
    Initial query of a scroll search.

    The query body is passed through to the client untouched.

    Attributes:
        index: Index name, list of names, or None for all indices
        body: Query DSL body (e.g. {"query": {"match_all": {}}})
        size: Hits per page
        params: Extra keyword arguments for client.search()
    """

    index: Optional[Union[str, list[str]]] = Field(None, description="Target index or indices")
    body: dict[str, Any] = Field(default_factory=dict, description="Query DSL body")
    size: Optional[int] = Field(None, description="Hits per page")
    params: dict[str, Any] = Field(default_factory=dict, description="Extra search arguments")

    def to_search_kwargs(self, scroll: str) -> dict[str, Any]:
        """Build keyword arguments for client.search() with a scroll lifetime."""
        kwargs: dict[str, Any] = dict(self.params)
        if self.index is not None:
            kwargs["index"] = self.index
        if self.size is not None:
            kwargs["size"] = self.size
        kwargs["body"] = self.body
        kwargs["scroll"] = scroll
        return kwargs
