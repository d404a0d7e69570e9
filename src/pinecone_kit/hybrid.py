# src/pinecone_kit/hybrid.py

from .errors import ValidationError
from .types import SparseValues


def hybrid_score_norm(
    dense: list[float],
    sparse: SparseValues,
    alpha: float,
) -> tuple[list[float], SparseValues]:
    """Weight a dense/sparse pair as a convex combination.

    The index scores ``alpha * dense + (1 - alpha) * sparse`` because the
    dot product is linear, so one query blends both similarities without
    the service needing explicit weighting support.

    Args:
        dense: Dense query vector.
        sparse: Sparse query vector.
        alpha: Weight in [0, 1]. 0.0 is all sparse, 1.0 is all dense.

    Returns:
        New (dense, sparse) pair. Inputs are left untouched.

    Raises:
        ValidationError: If alpha is outside [0, 1].
    """
    if not 0 <= alpha <= 1:
        raise ValidationError("Alpha must be between 0 and 1")

    weighted_sparse = SparseValues(
        indices=list(sparse.indices),
        values=[v * (1 - alpha) for v in sparse.values],
    )
    weighted_dense = [v * alpha for v in dense]
    return weighted_dense, weighted_sparse
