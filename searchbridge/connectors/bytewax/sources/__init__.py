# ==============================================================================
# Bytewax Custom Sources
# ==============================================================================
"""
Custom Bytewax sources for reading from OpenSearch.
"""

from searchbridge.connectors.bytewax.sources.opensearch import OpenSearchSource

__all__ = ["OpenSearchSource"]
