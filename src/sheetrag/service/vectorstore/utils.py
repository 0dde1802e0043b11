"""Similarity and retrieval-width helpers for the vector store."""

import math

from sheetrag.constants import MAX_TOP_K, MIN_TOP_K, RETRIEVAL_FRACTION


def cosine_similarity(vec_a: list[float], vec_b: list[float]) -> float:
    """Compute cosine similarity between two vectors.

    Args:
        vec_a: First embedding vector
        vec_b: Second embedding vector

    Returns:
        float: Cosine similarity, or 0.0 for empty, mismatched or zero vectors
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    magnitude_a = math.sqrt(sum(a * a for a in vec_a))
    magnitude_b = math.sqrt(sum(b * b for b in vec_b))

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def retrieval_width(total_chunks: int) -> int:
    """Number of chunks to retrieve for a store of the given size.

    Scales with the dataset (20% of all chunks) but stays within [20, 100].
    """
    return min(max(math.ceil(total_chunks * RETRIEVAL_FRACTION), MIN_TOP_K), MAX_TOP_K)
