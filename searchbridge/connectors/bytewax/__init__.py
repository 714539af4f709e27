# ==============================================================================
# Bytewax Connectors
# ==============================================================================
"""
Bytewax input and output connectors for OpenSearch.
"""

from searchbridge.connectors.bytewax.sinks import OpenSearchSink
from searchbridge.connectors.bytewax.sources import OpenSearchSource

__all__ = [
    "OpenSearchSink",
    "OpenSearchSource",
]
