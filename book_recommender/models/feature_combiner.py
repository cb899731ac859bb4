"""
Feature Combiner

Concatenates [title TF-IDF | genre multi-hot | synopsis TF-IDF] into one
namespaced sparse vector. Title and synopsis terms live in disjoint key
spaces even when the same lemma occurs in both fields.

Every book must be combined against the same corpus-wide vocabularies so
that all vectors of a request share one key universe. The caller sorts each
vocabulary once per request; key order follows the given order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from book_recommender.models.book import SparseVector

TITLE_PREFIX: Final[str] = "title_"
GENRE_PREFIX: Final[str] = "genre_"
SYNOPSIS_PREFIX: Final[str] = "synopsis_"


def combine(
    title_vector: SparseVector,
    genre_vector: Sequence[float],
    synopsis_vector: SparseVector,
    title_vocabulary: Sequence[str],
    synopsis_vocabulary: Sequence[str],
) -> SparseVector:
    """Build one book's combined feature vector.

    Args:
        title_vector: TF-IDF weights of the book's title.
        genre_vector: Multi-hot genre vector of the book.
        synopsis_vector: TF-IDF weights of the book's synopsis.
        title_vocabulary: All title terms of the corpus, sorted.
        synopsis_vocabulary: All synopsis terms of the corpus, sorted.

    Returns:
        Vector keyed by ``title_<term>``, ``genre_<index>`` and
        ``synopsis_<term>``, with explicit zeros for absent features.

    Example:
        >>> combine({"laut": 0.5}, [1, 0], {}, ["laut"], ["ombak"])
        {'title_laut': 0.5, 'genre_0': 1.0, 'genre_1': 0.0, 'synopsis_ombak': 0.0}
    """
    combined: SparseVector = {}

    for term in title_vocabulary:
        combined[f"{TITLE_PREFIX}{term}"] = float(title_vector.get(term, 0.0))

    for index, value in enumerate(genre_vector):
        combined[f"{GENRE_PREFIX}{index}"] = float(value)

    for term in synopsis_vocabulary:
        combined[f"{SYNOPSIS_PREFIX}{term}"] = float(synopsis_vector.get(term, 0.0))

    return combined
