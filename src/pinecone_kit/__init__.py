"""Typed async client for the Pinecone vector database.

Request shaping only:
- Null values are stripped from metadata and filters before sending
- Upserts are split into sequential batches
- Hybrid queries are weighted locally
- Query matches only carry the fields that were requested

Example:
    >>> from pinecone_kit import PineconeClient, Vector
    >>>
    >>> async with PineconeClient(namespace="docs") as client:
    ...     await client.upsert(vectors=[Vector(id="1", values=[0.1, 0.2])])
    ...     results = await client.query(vector=[0.1, 0.2], top_k=3)
"""

# Client
from .client import PineconeClient
from .config import PineconeConfig
from .factory import create_pinecone_client

# Errors
from .errors import (
    ConfigurationError,
    ErrorDetail,
    PineconeClientError,
    PineconeError,
    ValidationError,
)

# Helpers
from .hybrid import hybrid_score_norm

# Observability
from .observability import MetricsHook, NoOpMetricsHook
from .sanitize import remove_null_values, remove_null_values_from_object

# Types
from .types import (
    FetchResponse,
    Filter,
    IndexStats,
    NamespaceSummary,
    QueryParams,
    QueryResults,
    ScoredVector,
    ScoredVectorWithMetadata,
    ScoredVectorWithValues,
    ScoredVectorWithValuesAndMetadata,
    SparseValues,
    Vector,
)

__all__ = [
    # Client
    "PineconeClient",
    "PineconeConfig",
    "create_pinecone_client",
    # Errors
    "ConfigurationError",
    "ErrorDetail",
    "PineconeClientError",
    "PineconeError",
    "ValidationError",
    # Helpers
    "hybrid_score_norm",
    "remove_null_values",
    "remove_null_values_from_object",
    # Observability
    "MetricsHook",
    "NoOpMetricsHook",
    # Types
    "FetchResponse",
    "Filter",
    "IndexStats",
    "NamespaceSummary",
    "QueryParams",
    "QueryResults",
    "ScoredVector",
    "ScoredVectorWithMetadata",
    "ScoredVectorWithValues",
    "ScoredVectorWithValuesAndMetadata",
    "SparseValues",
    "Vector",
]
