# ==============================================================================
# Bytewax Sinks
# ==============================================================================
"""
Custom Bytewax sinks for writing to OpenSearch.
"""

from searchbridge.connectors.bytewax.sinks.opensearch import OpenSearchSink

__all__ = ["OpenSearchSink"]
