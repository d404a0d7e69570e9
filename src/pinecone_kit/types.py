# src/pinecone_kit/types.py

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from .errors import ValidationError

Metadata: TypeAlias = Mapping[str, Any]

# Leaf values allowed in a filter. None is accepted and stripped before sending.
FilterValue: TypeAlias = str | int | float | bool | None | list[str] | list[float]
Filter: TypeAlias = Mapping[str, FilterValue | Mapping[str, FilterValue]]

FILTER_OPERATORS = frozenset(
    {"$eq", "$ne", "$gt", "$gte", "$lt", "$lte", "$in", "$nin"}
)


@dataclass(frozen=True)
class SparseValues:
    """Sparse vector as parallel index/value lists."""

    indices: list[int]
    values: list[float]

    def __post_init__(self) -> None:
        if len(self.indices) != len(self.values):
            raise ValidationError(
                "Sparse vector indices and values must have the same length"
            )
        if len(set(self.indices)) != len(self.indices):
            raise ValidationError("Sparse vector indices must be unique")

    def to_json(self) -> dict[str, Any]:
        return {"indices": list(self.indices), "values": list(self.values)}

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "SparseValues":
        return cls(indices=list(data["indices"]), values=list(data["values"]))


@dataclass(frozen=True)
class Vector:
    id: str
    values: list[float]
    metadata: Metadata | None = None
    sparse_values: SparseValues | None = None

    def to_json(self) -> dict[str, Any]:
        """Wire form. Unset optional fields are left out."""
        data: dict[str, Any] = {"id": self.id, "values": list(self.values)}
        if self.metadata is not None:
            data["metadata"] = self.metadata
        if self.sparse_values is not None:
            data["sparseValues"] = self.sparse_values.to_json()
        return data

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Vector":
        sparse = data.get("sparseValues")
        return cls(
            id=data["id"],
            values=list(data.get("values") or []),
            metadata=data.get("metadata"),
            sparse_values=SparseValues.from_json(sparse) if sparse else None,
        )


@dataclass(frozen=True)
class QueryParams:
    """Validated query request.

    Exactly one of ``vector`` or ``id`` must be given. ``min_score`` and
    ``hybrid_alpha`` are applied locally and never sent.
    """

    top_k: int = 10
    vector: list[float] | None = None
    id: str | None = None
    sparse_vector: SparseValues | None = None
    filter: Filter | None = None
    include_values: bool = False
    include_metadata: bool = False
    min_score: float | None = None
    hybrid_alpha: float | None = None

    def __post_init__(self) -> None:
        if (self.vector is None) == (self.id is None):
            raise ValidationError("Queries require exactly one of vector or id")
        if self.top_k < 1:
            raise ValidationError("top_k must be at least 1")

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "topK": self.top_k,
            "includeValues": self.include_values,
            "includeMetadata": self.include_metadata,
        }
        if self.vector is not None:
            data["vector"] = list(self.vector)
        if self.id is not None:
            data["id"] = self.id
        if self.sparse_vector is not None:
            data["sparseVector"] = self.sparse_vector.to_json()
        if self.filter is not None:
            data["filter"] = self.filter
        return data


# ----------------------------------------------------------------------------
# Query result shapes
#
# The include flags sent with the query decide which of these a match is.
# Fields that were not requested do not exist on the match at all.
# ----------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class ScoredVector:
    id: str
    score: float
    sparse_values: SparseValues | None = None


@dataclass(frozen=True, kw_only=True)
class ScoredVectorWithValues(ScoredVector):
    values: list[float] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class ScoredVectorWithMetadata(ScoredVector):
    metadata: Metadata = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class ScoredVectorWithValuesAndMetadata(
    ScoredVectorWithValues, ScoredVectorWithMetadata
):
    pass


def parse_match(
    data: Mapping[str, Any], *, include_values: bool, include_metadata: bool
) -> ScoredVector:
    """Build the match shape selected by the request flags."""
    sparse = data.get("sparseValues")
    common: dict[str, Any] = {
        "id": data["id"],
        "score": data["score"],
        "sparse_values": SparseValues.from_json(sparse) if sparse else None,
    }
    values = list(data.get("values") or [])
    metadata = data.get("metadata") or {}

    if include_values and include_metadata:
        return ScoredVectorWithValuesAndMetadata(
            **common, values=values, metadata=metadata
        )
    if include_values:
        return ScoredVectorWithValues(**common, values=values)
    if include_metadata:
        return ScoredVectorWithMetadata(**common, metadata=metadata)
    return ScoredVector(**common)


@dataclass(frozen=True)
class QueryResults:
    namespace: str
    matches: list[ScoredVector]


@dataclass(frozen=True)
class FetchResponse:
    namespace: str
    vectors: dict[str, Vector]


@dataclass(frozen=True)
class NamespaceSummary:
    vector_count: int


@dataclass(frozen=True)
class IndexStats:
    namespaces: dict[str, NamespaceSummary]
    dimension: int
    index_fullness: float
    total_vector_count: int

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "IndexStats":
        return cls(
            namespaces={
                name: NamespaceSummary(vector_count=summary.get("vectorCount", 0))
                for name, summary in (data.get("namespaces") or {}).items()
            },
            dimension=data.get("dimension", 0),
            index_fullness=data.get("indexFullness", 0.0),
            total_vector_count=data.get("totalVectorCount", 0),
        )
