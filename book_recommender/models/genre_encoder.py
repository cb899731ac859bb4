"""
Genre Encoder - multi-hot encoding of genre labels.

Each book is represented by a binary vector over the corpus genre vocabulary
(the sorted set of case-folded labels). Vocabulary order defines vector
indices, so it is always sorted.

Corpus-wide encoding uses scikit-learn's MultiLabelBinarizer, whose classes_
are sorted, so its columns line up with build_genre_vocabulary().
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
from sklearn.preprocessing import MultiLabelBinarizer

from book_recommender.models.book import parse_genre_labels

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from book_recommender.models.book import Book

__all__ = [
    "build_genre_vocabulary",
    "encode_corpus_genres",
    "encode_genres",
    "parse_genre_labels",
]


def build_genre_vocabulary(books: Sequence[Book]) -> list[str]:
    """Sorted distinct genre labels across the corpus.

    Books without genre data contribute nothing.
    """
    vocabulary: set[str] = set()
    for book in books:
        vocabulary.update(book.genre_labels or ())
    return sorted(vocabulary)


def encode_genres(book: Book, vocabulary: Sequence[str]) -> list[int]:
    """Multi-hot vector of a single book over a genre vocabulary.

    Args:
        book: The book to encode.
        vocabulary: Sorted genre vocabulary of the current corpus.

    Returns:
        List of len(vocabulary) with 1 where the book has the genre. A book
        without genre data yields all zeros.
    """
    labels = set(book.genre_labels or ())
    return [1 if genre in labels else 0 for genre in vocabulary]


def encode_corpus_genres(books: Sequence[Book]) -> tuple[list[str], NDArray[np.int_]]:
    """Genre vocabulary and multi-hot matrix for a whole corpus.

    Args:
        books: Corpus in order.

    Returns:
        Tuple of (vocabulary, matrix) where matrix has one row per book and
        one column per vocabulary entry.
    """
    label_sets = [book.genre_labels or () for book in books]

    binarizer = MultiLabelBinarizer()
    matrix = binarizer.fit_transform(label_sets)
    vocabulary = [str(genre) for genre in binarizer.classes_]

    return vocabulary, np.asarray(matrix, dtype=np.int_).reshape(len(books), len(vocabulary))
