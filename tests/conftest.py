# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- A MagicMock standing in for an opensearch-py client
- Helpers to build search/scroll/bulk responses
"""

from unittest.mock import MagicMock

import pytest


def make_hit(doc_id: str, source: dict | None = None, index: str = "docs") -> dict:
    """Build a raw search hit."""
    hit = {"_index": index, "_id": doc_id, "_score": None}
    if source is not None:
        hit["_source"] = source
    return hit


def make_page(hits: list, scroll_id: str = "scroll-1") -> dict:
    """Build a search/scroll response holding one page of hits."""
    return {
        "_scroll_id": scroll_id,
        "took": 1,
        "timed_out": False,
        "hits": {"total": {"value": len(hits), "relation": "eq"}, "hits": hits},
    }


def make_bulk_response(items: list | None = None, errors: bool = False) -> dict:
    """Build a bulk API response."""
    return {"took": 3, "errors": errors, "items": items or []}


@pytest.fixture()
def client():
    """An OpenSearch client double.

    bulk() succeeds with no failed items unless a test overrides it.
    """
    client = MagicMock(name="OpenSearch")
    client.bulk.return_value = make_bulk_response()
    return client


@pytest.fixture()
def destroy_fn():
    """A teardown callback that records its calls."""
    return MagicMock(name="destroy_fn")
