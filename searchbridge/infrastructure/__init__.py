# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Concrete adapters for external systems.

Currently supported:
- OpenSearch (search/)
"""
