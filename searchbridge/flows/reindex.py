# ==============================================================================
# Reindex Dataflow using Bytewax
# ==============================================================================
"""
Copy every document of one OpenSearch index into another.

Scrolls the source index with OpenSearchSource and bulk-indexes each hit
into the target index under its original _id with OpenSearchSink.

Usage:
    python -m searchbridge.flows.reindex
"""

import logging
from collections.abc import Callable
from functools import partial
from typing import Optional

from bytewax import operators as op
from bytewax.dataflow import Dataflow
from bytewax.run import cli_main
from opensearchpy import OpenSearch

from searchbridge.connectors.bytewax import OpenSearchSink, OpenSearchSource
from searchbridge.core.models import IndexRequest, SearchRequest
from searchbridge.infrastructure.search import client_from_settings, wait_for_cluster
from searchbridge.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


def passthrough(item):
    """Return the item unchanged."""
    return item


def hit_to_index_request(target_index: str, hit: dict) -> IndexRequest:
    """Build an index request that writes a hit's source under its _id."""
    return IndexRequest(
        index=target_index,
        id=hit["_id"],
        routing=hit.get("_routing"),
        document=hit.get("_source", {}),
    )


def match_all(settings: Settings) -> SearchRequest:
    """Query every document of the source index, one scroll page at a time."""
    return SearchRequest(
        index=settings.reindex.source_index,
        body={"query": {"match_all": {}}, "sort": ["_doc"]},
        size=settings.reindex.page_size,
    )


def build_flow(
    settings: Optional[Settings] = None,
    client_supplier: Optional[Callable[[], OpenSearch]] = None,
) -> Dataflow:
    """
    Build the reindex dataflow.

    Args:
        settings: Application settings. If None, uses get_settings().
        client_supplier: Builds OpenSearch clients. Defaults to the configured cluster.

    Returns:
        Dataflow: source index -> index requests -> target index
    """
    settings = settings or get_settings()
    client_supplier = client_supplier or partial(client_from_settings, settings)

    flow = Dataflow("opensearch_reindex")

    source = OpenSearchSource(
        client_supplier=client_supplier,
        search_request_supplier=partial(match_all, settings),
        scroll_timeout=settings.reindex.scroll_timeout,
        map_hit_fn=passthrough,
    )
    hits = op.input("opensearch_in", flow, source)

    requests = op.map(
        "to_index_request", hits, partial(hit_to_index_request, settings.reindex.target_index)
    )

    sink = OpenSearchSink(client_supplier=client_supplier, request_fn=passthrough)
    op.output("opensearch_out", requests, sink)

    return flow


def run():
    """
    Run the reindex dataflow.

    Waits for the cluster to answer before starting, then runs the flow
    with the configured number of workers. The dataflow ends once the
    scroll is exhausted.
    """
    settings = get_settings()

    client = client_from_settings(settings)
    try:
        wait_for_cluster(client)
    finally:
        client.close()

    flow = build_flow(settings)

    logger.info("Starting reindex (Bytewax)...")
    logger.info("Source index: %s", settings.reindex.source_index)
    logger.info("Target index: %s", settings.reindex.target_index)
    logger.info("Workers per process: %d", settings.reindex.workers)
    cli_main(flow, workers_per_process=settings.reindex.workers)


if __name__ == "__main__":
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress noisy third-party loggers
    logging.getLogger("opensearch").setLevel(logging.WARNING)
    run()
