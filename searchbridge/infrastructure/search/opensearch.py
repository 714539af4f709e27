# ==============================================================================
# OpenSearch Client Construction
# ==============================================================================
"""
Helpers for building and tearing down OpenSearch clients.

Provides:
- build_client: Client with HTTP basic auth for a single host
- client_from_settings: Same, driven by OpenSearchSettings
- close_client: Default teardown used by the sink and source
- check_opensearch_connection / wait_for_cluster: Reachability checks

Client construction never retries; failures propagate to the caller.
"""

import logging
from typing import Any, Optional

from opensearchpy import OpenSearch

from searchbridge.utils.config import Settings, get_settings
from searchbridge.utils.retry import OPENSEARCH_RETRY_EXCEPTIONS, retry_light

logger = logging.getLogger(__name__)


def build_client(
    username: str,
    password: Optional[str],
    hostname: str,
    port: int,
    **client_options: Any,
) -> OpenSearch:
    """
    Build an OpenSearch client authenticated with HTTP basic auth.

    Args:
        username: Basic auth username
        password: Basic auth password (None is sent as an empty password)
        hostname: Cluster host name
        port: Cluster HTTP port
        **client_options: Extra OpenSearch() arguments (use_ssl, timeout, ...)

    Returns:
        An OpenSearch client. No request is issued.
    """
    return OpenSearch(
        hosts=[{"host": hostname, "port": port}],
        http_auth=(username, password or ""),
        **client_options,
    )


def client_from_settings(settings: Optional[Settings] = None) -> OpenSearch:
    """
    Build an OpenSearch client from application settings.

    Args:
        settings: Application settings. If None, uses get_settings().
    """
    os_settings = (settings or get_settings()).opensearch
    return build_client(
        os_settings.user,
        os_settings.password,
        os_settings.host,
        os_settings.port,
        use_ssl=os_settings.use_ssl,
        verify_certs=os_settings.verify_certs,
        ssl_show_warn=False,
        timeout=os_settings.timeout,
    )


def close_client(client: OpenSearch) -> None:
    """Close a client, logging rather than raising on failure."""
    try:
        client.close()
        logger.debug("OpenSearch client closed")
    except Exception as e:
        logger.warning("Error closing connection: %s", e)


def check_opensearch_connection(settings: Optional[Settings] = None) -> bool:
    """
    Check if OpenSearch is reachable.

    Args:
        settings: Application settings. If None, uses get_settings().

    Returns:
        True if connection successful, False otherwise
    """
    try:
        client = client_from_settings(settings)
    except Exception:
        return False

    try:
        client.info()
        return True
    except Exception:
        return False
    finally:
        close_client(client)


@retry_light(OPENSEARCH_RETRY_EXCEPTIONS, logger)
def wait_for_cluster(client: OpenSearch) -> dict:
    """
    Block until the cluster answers an info request.

    Retries connection errors and timeouts with the light retry policy,
    then re-raises the last error.

    Returns:
        The cluster info response
    """
    info = client.info()
    logger.info(
        "Connected to OpenSearch (cluster=%s, version=%s)",
        info.get("cluster_name", "unknown"),
        info.get("version", {}).get("number", "unknown"),
    )
    return info
