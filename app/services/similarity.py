"""
Embedding similarity scoring.

The geometric score is cosine similarity rescaled linearly from [-1, 1] to
an integer percentage. The rescaling is a presentation choice, not a
calibrated probability of fit.
"""

import math
from typing import Sequence
import numpy as np


class DimensionMismatchError(ValueError):
    """Raised when two vectors of different length are compared."""
    pass


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If len(a) != len(b)
    """
    if len(a) != len(b):
        raise DimensionMismatchError(
            f"Vectors must have the same length (got {len(a)} and {len(b)})"
        )

    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def similarity_to_score(similarity: float) -> int:
    """Map a similarity in [-1, 1] to an integer percentage in [0, 100]."""
    scaled = ((similarity + 1) / 2) * 100
    # Round half up; the built-in round() would send 12.5 to 12
    return int(math.floor(scaled + 0.5))


def geometric_score(candidate_embedding: Sequence[float], job_embedding: Sequence[float]) -> int:
    """Percentage match derived purely from two embedding vectors."""
    return similarity_to_score(cosine_similarity(candidate_embedding, job_embedding))
