# ==============================================================================
# Example Dataflows
# ==============================================================================
"""
Ready-to-run Bytewax dataflows built from the OpenSearch connectors.
"""
