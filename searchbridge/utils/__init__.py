# ==============================================================================
# Searchbridge Utilities
# ==============================================================================
"""
Shared utilities: configuration and retry policies.
"""

from searchbridge.utils.config import (
    DEFAULT_SCROLL_TIMEOUT,
    OpenSearchSettings,
    ReindexSettings,
    Settings,
    get_settings,
)

__all__ = [
    "DEFAULT_SCROLL_TIMEOUT",
    "OpenSearchSettings",
    "ReindexSettings",
    "Settings",
    "get_settings",
]
