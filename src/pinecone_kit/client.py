# src/pinecone_kit/client.py

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from time import monotonic
from typing import Any

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import PineconeConfig
from .errors import ValidationError
from .http import ApiClient
from .hybrid import hybrid_score_norm
from .observability import names
from .observability.base import MetricsHook, NoOpMetricsHook
from .sanitize import remove_null_values, remove_null_values_from_object
from .types import (
    FILTER_OPERATORS,
    FetchResponse,
    Filter,
    IndexStats,
    Metadata,
    QueryParams,
    QueryResults,
    SparseValues,
    Vector,
    parse_match,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
CONTROLLER_URL = "https://controller.{environment}.pinecone.io"


class PineconeClient:
    """Client for a single Pinecone index.

    Namespace and metadata schema are fixed at construction and cannot be
    changed afterwards. Every call builds an independent request; the
    client holds no mutable state.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        namespace: str | None = None,
        metadata_schema: type[BaseModel] | None = None,
        http_client: httpx.AsyncClient | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: Pinecone API key. Falls back to PINECONE_API_KEY.
            base_url: Index endpoint. Falls back to PINECONE_BASE_URL.
            namespace: Namespace used by every data-plane call.
            metadata_schema: Optional pydantic model describing vector metadata.
                Upserted metadata (after null stripping), filter keys and
                set_metadata keys are checked against it.
            http_client: Transport to use. Pooling, retries, TLS and timeouts
                are configured there. If omitted, a default client without a
                timeout is created.
            metrics_hook: Hook for recording metrics.
            environ: Environment mapping for fallbacks (defaults to os.environ).

        Raises:
            ConfigurationError: If the API key or base URL cannot be resolved.

        Examples:
            client = PineconeClient(api_key="...", base_url="https://idx.svc.pinecone.io")

            async with PineconeClient(namespace="docs") as client:
                await client.upsert(vectors=[Vector(id="1", values=[0.1, 0.2])])
        """
        config = PineconeConfig(
            api_key=api_key, base_url=base_url, namespace=namespace
        ).resolve(environ)

        self._config = config
        self._metadata_schema = metadata_schema
        self.metrics_hook = metrics_hook
        self._api = ApiClient(
            api_key=config.api_key,  # type: ignore[arg-type]
            base_url=config.base_url,  # type: ignore[arg-type]
            http_client=http_client,
            metrics_hook=metrics_hook,
        )
        logger.info(
            "Initialized PineconeClient with base_url=%s, namespace=%s",
            config.base_url,
            config.namespace,
        )

    @property
    def api_key(self) -> str:
        return self._config.api_key  # type: ignore[return-value]

    @property
    def base_url(self) -> str:
        return self._config.base_url  # type: ignore[return-value]

    @property
    def namespace(self) -> str | None:
        return self._config.namespace

    @property
    def metadata_schema(self) -> type[BaseModel] | None:
        return self._metadata_schema

    async def close(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        await self._api.aclose()

    async def __aenter__(self) -> "PineconeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Data plane
    # ------------------------------------------------------------------

    async def delete(
        self,
        *,
        ids: list[str] | None = None,
        delete_all: bool | None = None,
        filter: Filter | None = None,
    ) -> None:
        """
        Delete vectors from the namespace.

        Args:
            ids: Ids of the vectors to delete.
            delete_all: Delete every vector in the namespace.
            filter: Metadata filter selecting vectors to delete.
        """
        self._validate_filter(filter)
        start = monotonic()

        body = self._with_namespace(
            _without_unset({"ids": ids, "deleteAll": delete_all, "filter": filter})
        )
        await self._api.post("vectors/delete", json=remove_null_values(body))

        self._record(names.PINECONE_DELETE_DURATION, "delete", start)

    async def describe_index_stats(self, *, filter: Filter | None = None) -> IndexStats:
        """
        Statistics about the index contents.

        Args:
            filter: Only count vectors matching this metadata filter.

        Returns:
            Per-namespace vector counts, dimension and fullness.
        """
        self._validate_filter(filter)
        start = monotonic()

        body = remove_null_values(_without_unset({"filter": filter}))
        response = await self._api.post("describe_index_stats", json=body)
        stats = IndexStats.from_json(response.json())

        self._record(
            names.PINECONE_DESCRIBE_INDEX_STATS_DURATION, "describe_index_stats", start
        )
        return stats

    async def fetch(self, *, ids: list[str]) -> FetchResponse:
        """
        Look up vectors by id.

        Args:
            ids: Ids to fetch. Sent as repeated query parameters, in order.

        Returns:
            FetchResponse keyed by vector id. Missing ids are simply absent.
        """
        start = monotonic()

        params: list[tuple[str, str]] = []
        if self.namespace:
            params.append(("namespace", self.namespace))
        params.extend(("ids", vector_id) for vector_id in ids)

        response = await self._api.get("vectors/fetch", params=params)
        data = response.json()

        self._record(names.PINECONE_FETCH_DURATION, "fetch", start)
        return FetchResponse(
            namespace=data.get("namespace", ""),
            vectors={
                vector_id: Vector.from_json(vector)
                for vector_id, vector in (data.get("vectors") or {}).items()
            },
        )

    async def query(
        self,
        *,
        top_k: int = 10,
        vector: list[float] | None = None,
        id: str | None = None,
        sparse_vector: SparseValues | None = None,
        filter: Filter | None = None,
        include_values: bool = False,
        include_metadata: bool = False,
        min_score: float | None = None,
        hybrid_alpha: float | None = None,
    ) -> QueryResults:
        """
        Search the namespace for the most similar vectors.

        Args:
            top_k: Number of results requested from the index.
            vector: Dense query vector. Exactly one of vector or id is required.
            id: Id of a stored vector to use as the query vector.
            sparse_vector: Sparse query vector.
            filter: Metadata filter.
            include_values: Return vector values with each match.
            include_metadata: Return metadata with each match.
            min_score: Drop matches scoring below this value. Applied locally
                after the response arrives, so fewer than top_k matches may
                come back.
            hybrid_alpha: Dense vs sparse weighting. 0.0 is all sparse, 1.0 is
                all dense. Requires both vector and sparse_vector.

        Returns:
            QueryResults whose matches carry ``values`` and ``metadata`` only
            when the matching include flag was set.

        Raises:
            ValidationError: On invalid parameters, before any request is sent.
        """
        params = QueryParams(
            top_k=top_k,
            vector=vector,
            id=id,
            sparse_vector=sparse_vector,
            filter=filter,
            include_values=include_values,
            include_metadata=include_metadata,
            min_score=min_score,
            hybrid_alpha=hybrid_alpha,
        )
        self._validate_filter(filter)

        if hybrid_alpha is not None:
            if vector is None or sparse_vector is None:
                raise ValidationError(
                    "Hybrid queries require vector and sparse_vector parameters"
                )
            dense, sparse = hybrid_score_norm(vector, sparse_vector, hybrid_alpha)
            params = replace(params, vector=dense, sparse_vector=sparse)

        start = monotonic()
        body = self._with_namespace(params.to_json())
        response = await self._api.post("query", json=remove_null_values(body))
        data = response.json()

        matches = [
            parse_match(
                match,
                include_values=params.include_values,
                include_metadata=params.include_metadata,
            )
            for match in data.get("matches") or []
        ]
        if min_score is not None:
            matches = [m for m in matches if m.score >= min_score]

        self._record(names.PINECONE_QUERY_DURATION, "query", start)
        return QueryResults(namespace=data.get("namespace", ""), matches=matches)

    async def update(
        self,
        *,
        id: str,
        values: list[float] | None = None,
        sparse_values: SparseValues | None = None,
        set_metadata: Metadata | None = None,
    ) -> None:
        """
        Update a single vector.

        Values overwrite the stored values. Fields in set_metadata are added
        or overwritten; fields set to None are dropped from the request and
        keep their stored value.

        Args:
            id: Id of the vector to update.
            values: New dense values.
            sparse_values: New sparse values.
            set_metadata: Metadata fields to set.
        """
        self._validate_metadata_keys(set_metadata)
        start = monotonic()

        body = self._with_namespace(
            _without_unset(
                {
                    "id": id,
                    "values": values,
                    "sparseValues": sparse_values.to_json() if sparse_values else None,
                    "setMetadata": set_metadata,
                }
            )
        )
        await self._api.post("vectors/update", json=remove_null_values(body))

        self._record(names.PINECONE_UPDATE_DURATION, "update", start)

    async def upsert(
        self,
        *,
        vectors: Iterable[Vector],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """
        Insert or overwrite vectors.

        Vectors are sent in consecutive batches of at most batch_size, one
        request at a time. A failing batch stops the upsert; batches already
        written stay written.

        Args:
            vectors: Vectors to write. Null metadata values are stripped.
            batch_size: Maximum vectors per request.
        """
        if batch_size < 1:
            raise ValidationError("batch_size must be at least 1")

        items = list(vectors)
        for item in items:
            self._validate_metadata(item.metadata)

        if not items:
            return

        start = monotonic()
        logger.info("Upserting %d vectors in batches of %d", len(items), batch_size)

        for batch_start in range(0, len(items), batch_size):
            batch = items[batch_start : batch_start + batch_size]
            logger.debug(
                "Upserting batch at offset %d with %d vectors", batch_start, len(batch)
            )
            self.metrics_hook.record_gauge(names.PINECONE_UPSERT_BATCH_SIZE, len(batch))
            body = self._with_namespace(
                {"vectors": [remove_null_values(item.to_json()) for item in batch]}
            )
            await self._api.post("vectors/upsert", json=body)

        self._record(names.PINECONE_UPSERT_DURATION, "upsert", start)
        logger.info("Successfully upserted %d vectors", len(items))

    # ------------------------------------------------------------------
    # Control plane
    # ------------------------------------------------------------------

    async def create_index(
        self,
        *,
        environment: str,
        name: str,
        dimension: int,
        metric: str | None = None,
        pods: int | None = None,
        replicas: int | None = None,
        shards: int | None = None,
        pod_type: str | None = None,
        metadata_config: Mapping[str, Any] | None = None,
        source_collection: str | None = None,
    ) -> None:
        """
        Create an index.

        Args:
            environment: Environment to create the index in, e.g. us-east-1-aws.
            name: Name of the index. At most 45 characters.
            dimension: Dimension of the vectors stored in the index.
            metric: "euclidean", "cosine" or "dotproduct".
            pods: Number of pods, including replicas.
            replicas: Number of replicas.
            shards: Number of shards.
            pod_type: One of s1, p1 or p2 with a .x1/.x2/.x4/.x8 suffix.
            metadata_config: Which metadata fields to index. All by default.
            source_collection: Collection to create the index from.
        """
        start = monotonic()
        body = _without_unset(
            {
                "name": name,
                "dimension": dimension,
                "metric": metric,
                "pods": pods,
                "replicas": replicas,
                "shards": shards,
                "pod_type": pod_type,
                "metadata_config": metadata_config,
                "source_collection": source_collection,
            }
        )
        await self._controller(environment).post("databases", json=body)
        self._record(names.PINECONE_CREATE_INDEX_DURATION, "create_index", start)

    async def delete_index(self, *, environment: str, name: str) -> None:
        """
        Delete an index.

        Args:
            environment: Environment the index is in.
            name: Name of the index.
        """
        start = monotonic()
        await self._controller(environment).delete(f"databases/{name}")
        self._record(names.PINECONE_DELETE_INDEX_DURATION, "delete_index", start)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _controller(self, environment: str) -> ApiClient:
        return self._api.extend(base_url=CONTROLLER_URL.format(environment=environment))

    def _with_namespace(self, body: dict[str, Any]) -> dict[str, Any]:
        if self.namespace is None:
            return body
        return {"namespace": self.namespace, **body}

    def _record(self, duration_name: str, operation: str, start: float) -> None:
        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(duration_name, elapsed_ms)
        self.metrics_hook.increment(
            names.PINECONE_OPERATIONS_TOTAL, labels={"operation": operation}
        )

    def _validate_metadata(self, metadata: Metadata | None) -> None:
        if self._metadata_schema is None or metadata is None:
            return
        try:
            # None means "absent", so validate what will actually be sent.
            self._metadata_schema.model_validate(
                remove_null_values_from_object(metadata)
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid metadata: {e}") from e

    def _validate_metadata_keys(self, metadata: Metadata | None) -> None:
        if self._metadata_schema is None or metadata is None:
            return
        unknown = set(metadata) - set(self._metadata_schema.model_fields)
        if unknown:
            raise ValidationError(f"Unknown metadata fields: {sorted(unknown)}")

    def _validate_filter(self, filter: Filter | None) -> None:
        if self._metadata_schema is None or filter is None:
            return
        fields = self._metadata_schema.model_fields
        for key, value in filter.items():
            if key.startswith("$"):
                if key not in FILTER_OPERATORS:
                    raise ValidationError(f"Unknown filter operator: {key}")
                continue
            if key not in fields:
                raise ValidationError(f"Unknown metadata field in filter: {key}")
            if isinstance(value, Mapping):
                for operator in value:
                    if operator not in FILTER_OPERATORS:
                        raise ValidationError(f"Unknown filter operator: {operator}")


def _without_unset(body: dict[str, Any]) -> dict[str, Any]:
    # None means "not given" for top-level request fields.
    return {k: v for k, v in body.items() if v is not None}
