# ==============================================================================
# Dataflow Connectors
# ==============================================================================
"""
Stream-processing framework adapters for OpenSearch.

Currently supported:
- Bytewax (bytewax/)
"""
