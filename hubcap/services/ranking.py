"""Embedding-based re-ranking of links against past feedback.

Score per link::

    score = 2 * cos(link, mean(liked)) - cos(link, mean(disliked))

Each term is only applied when that preference set is non-empty.  A link
with no embedding, or an embedding of a different dimension than the
preference vectors, scores 0.  Sorting is stable, so equal scores keep
their input order, and ranking with no feedback at all is the identity.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from hubcap.models.link import Link

LIKED_WEIGHT = 2.0
DISLIKED_WEIGHT = 1.0


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors; 0.0 if either is all zeros.

    Raises
    ------
    ValueError
        If the vectors differ in length.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    if vec_a.shape != vec_b.shape:
        raise ValueError(f"Vectors must have the same length ({vec_a.size} != {vec_b.size})")
    denominator = float(np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
    if denominator == 0.0:
        return 0.0
    return float(np.dot(vec_a, vec_b) / denominator)


def average_embedding(vectors: Sequence[Sequence[float]]) -> list[float]:
    """Element-wise mean of *vectors*.

    Raises
    ------
    ValueError
        If *vectors* is empty or the vectors differ in length.
    """
    if not vectors:
        raise ValueError("Cannot calculate average of empty array")
    return np.mean(np.asarray(vectors, dtype=np.float64), axis=0).tolist()


def _score(
    embedding: Sequence[float] | None,
    avg_liked: list[float] | None,
    avg_disliked: list[float] | None,
) -> float:
    if not embedding:
        return 0.0
    score = 0.0
    try:
        if avg_liked is not None:
            score += LIKED_WEIGHT * cosine_similarity(embedding, avg_liked)
        if avg_disliked is not None:
            score -= DISLIKED_WEIGHT * cosine_similarity(embedding, avg_disliked)
    except ValueError:
        return 0.0
    return score


def rank_links(
    links: list[Link],
    liked: Sequence[Sequence[float]],
    disliked: Sequence[Sequence[float]],
) -> list[Link]:
    """Reorder *links* by similarity to liked and dissimilarity to disliked vectors.

    Never adds or drops links.  Returns the input order when both
    preference sets are empty.
    """
    if not liked and not disliked:
        return list(links)

    avg_liked = average_embedding(liked) if liked else None
    avg_disliked = average_embedding(disliked) if disliked else None

    scored = [(_score(link.embedding, avg_liked, avg_disliked), link) for link in links]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [link for _, link in scored]
