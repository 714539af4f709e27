# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()

DEFAULT_SCROLL_TIMEOUT = "60s"


class OpenSearchSettings(BaseSettings):
    """OpenSearch connection settings."""

    model_config = SettingsConfigDict(env_prefix="OPENSEARCH_")

    host: str = Field(default="localhost", description="OpenSearch host")
    port: int = Field(default=9200, description="OpenSearch port")
    user: str = Field(default="admin", description="OpenSearch username")
    password: Optional[str] = Field(default="admin", description="OpenSearch password")
    use_ssl: bool = Field(default=False, description="Use SSL")
    verify_certs: bool = Field(
        default=True, description="Verify SSL certificates (False for local self-signed)"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")

    @property
    def hosts(self) -> list[dict]:
        """Build OpenSearch hosts configuration."""
        return [
            {
                "host": self.host,
                "port": self.port,
            }
        ]


class ReindexSettings(BaseSettings):
    """Settings for the example reindex dataflow.

    The dataflow scrolls every document of the source index and bulk-indexes
    it into the target index under the same document ID.
    """

    model_config = SettingsConfigDict(env_prefix="REINDEX_")

    source_index: str = Field(default="source", description="Index to scroll from")
    target_index: str = Field(default="target", description="Index to bulk-write into")
    scroll_timeout: str = Field(
        default=DEFAULT_SCROLL_TIMEOUT,
        description="How long the cluster keeps the scroll context alive between pages",
    )
    page_size: int = Field(default=500, description="Hits per scroll page")
    workers: int = Field(default=1, description="Bytewax workers per process")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    opensearch: OpenSearchSettings = Field(default_factory=OpenSearchSettings)
    reindex: ReindexSettings = Field(default_factory=ReindexSettings)

    # General settings
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
