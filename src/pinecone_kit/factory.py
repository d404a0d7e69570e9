# src/pinecone_kit/factory.py

from collections.abc import Mapping

import httpx
from pydantic import BaseModel

from .client import PineconeClient
from .config import PineconeConfig
from .observability.base import MetricsHook, NoOpMetricsHook


def create_pinecone_client(
    config: PineconeConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
    *,
    http_client: httpx.AsyncClient | None = None,
    metadata_schema: type[BaseModel] | None = None,
    environ: Mapping[str, str] | None = None,
) -> PineconeClient:
    """Create a PineconeClient from config.

    Args:
        config: Connection settings. Missing values fall back to the environment.
        metrics_hook: Optional metrics hook for observability.
        http_client: Optional preconfigured transport.
        metadata_schema: Optional pydantic model for vector metadata.
        environ: Environment mapping used for fallbacks.

    Returns:
        Configured PineconeClient.

    Raises:
        ConfigurationError: If the API key or base URL cannot be resolved.

    Example:
        >>> config = PineconeConfig(namespace="docs")
        >>> client = create_pinecone_client(config)
        >>> await client.query(vector=[0.1, 0.2], top_k=5)
    """
    return PineconeClient(
        api_key=config.api_key,
        base_url=config.base_url,
        namespace=config.namespace,
        metadata_schema=metadata_schema,
        http_client=http_client,
        metrics_hook=metrics_hook,
        environ=environ,
    )
