"""
Similarity Ranker

Cosine similarity over namespaced sparse vectors and top-N ranking.

Sparse dict vectors are turned into a single scipy CSR matrix with
DictVectorizer, so the target and every candidate share one column space,
and scored in one vectorized cosine_similarity call.

Patterns Applied:
- NumPy / scikit-learn vectorization for batch scoring
- Stable sort so equal scores keep corpus order
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Final

import numpy as np
from sklearn.feature_extraction import DictVectorizer
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine_similarity

from book_recommender.models.book import Book, SimilarityResult, SparseVector

if TYPE_CHECKING:
    from numpy.typing import NDArray

MIN_SCORE: Final[float] = 0.0
MAX_SCORE: Final[float] = 1.0


def similarity_scores(
    target: SparseVector,
    candidates: Sequence[SparseVector],
) -> NDArray[np.float64]:
    """Cosine similarity of one target vector against many candidates.

    A zero-magnitude vector on either side scores 0.0. Scores are clipped to
    [0, 1]; weights are non-negative, so clipping only absorbs rounding.

    Args:
        target: The target vector.
        candidates: Candidate vectors.

    Returns:
        Array of len(candidates) scores, in candidate order.
    """
    if not candidates:
        return np.zeros(0, dtype=np.float64)

    vectorizer = DictVectorizer(dtype=np.float64, sparse=True, sort=True)
    matrix = vectorizer.fit_transform([target, *candidates])

    # No features at all: every vector is the zero vector
    if matrix.shape[1] == 0:
        return np.zeros(len(candidates), dtype=np.float64)

    scores = pairwise_cosine_similarity(matrix[0], matrix[1:]).ravel()
    return np.clip(scores, MIN_SCORE, MAX_SCORE).astype(np.float64)


def cosine_similarity(a: SparseVector, b: SparseVector) -> float:
    """Cosine similarity of two sparse vectors.

    Example:
        >>> cosine_similarity({"x": 1.0}, {"y": 1.0})
        0.0
    """
    return float(similarity_scores(a, [b])[0])


def rank(
    target: SparseVector,
    candidates: Sequence[tuple[Book, SparseVector]],
    exclude_id: int | str | None,
    top_n: int,
) -> list[SimilarityResult]:
    """Rank candidates by similarity to the target.

    Args:
        target: Combined vector of the target book.
        candidates: (book, combined vector) pairs in corpus order.
        exclude_id: Id of the book to leave out (the target itself).
        top_n: Maximum number of results.

    Returns:
        Up to top_n results, highest score first; ties keep corpus order.

    Raises:
        ValueError: If top_n is not positive.
    """
    if top_n <= 0:
        raise ValueError(f"top_n must be positive, got {top_n}")

    remaining = [(book, vector) for book, vector in candidates if book.id != exclude_id]
    scores = similarity_scores(target, [vector for _, vector in remaining])

    # sorted() is stable: equal scores stay in corpus order
    ranked = sorted(
        (SimilarityResult(book=book, score=float(score)) for (book, _), score in zip(remaining, scores)),
        key=lambda result: result.score,
        reverse=True,
    )
    return ranked[:top_n]
