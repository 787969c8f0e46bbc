from typing import List

import numpy as np


def cosine_similarity(vec1: List[float], vec2: List[float]) -> float:
    """
    Calculate cosine similarity between two embedding vectors.

    Formula: cos(θ) = (a · b) / (||a|| × ||b||)

    Args:
        vec1: First embedding vector
        vec2: Second embedding vector

    Returns:
        Similarity score from -1 (opposite) to 1 (identical).
        Returns 0.0 if either vector has zero magnitude.

    Raises:
        ValueError: vectors differ in length
    """
    if len(vec1) != len(vec2):
        raise ValueError(f"Vectors must have the same length ({len(vec1)} != {len(vec2)})")

    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(a, b) / (norm_a * norm_b))
