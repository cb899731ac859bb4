"""
Book Recommender - Recommendation Orchestrator

Wires the pipeline together per request:

    corpus → malformed-book policy → genre multi-hot
           → title TF-IDF / synopsis TF-IDF → combine → rank

Everything is recomputed from the supplied corpus snapshot on every call.
Nothing is cached between calls, so concurrent calls share no state.

Patterns Applied:
- Pure functions over an immutable corpus snapshot
- One span per pipeline stage, structured log per request
- Namespaced exceptions for terminal conditions (empty corpus, unknown target)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Final, Literal

from book_recommender.core.config import MalformedBookPolicy
from book_recommender.core.exceptions import (
    EmptyCorpusError,
    MalformedBookError,
    TargetNotFoundError,
)
from book_recommender.core.logging import get_logger
from book_recommender.core.tracing import pipeline_span
from book_recommender.models.book import Book, Recommendation
from book_recommender.models.feature_combiner import combine
from book_recommender.models.genre_encoder import encode_corpus_genres
from book_recommender.models.similarity import rank
from book_recommender.models.tfidf_vectorizer import collect_vocabulary, compute_tfidf

logger = get_logger(__name__)

DEFAULT_TOP_N: Final[int] = 5

MatchMode = Literal["auto", "id", "title"]
MATCH_MODES: Final[tuple[str, ...]] = ("auto", "id", "title")


# =============================================================================
# Target Selection
# =============================================================================


def _find_by_id(corpus: Sequence[Book], selector: int | str) -> Book | None:
    selector_text = str(selector).strip()
    for book in corpus:
        if book.id == selector or str(book.id) == selector_text:
            return book
    return None


def _find_by_title(corpus: Sequence[Book], selector: int | str) -> Book | None:
    needle = str(selector).strip().lower()
    for book in corpus:
        if needle in book.title.lower():
            return book
    return None


def select_target(
    corpus: Sequence[Book],
    selector: int | str,
    match: MatchMode = "auto",
) -> Book:
    """Resolve the target book.

    Args:
        corpus: Books in corpus order.
        selector: Book id, or a title fragment.
        match: "id" for exact id, "title" for case-insensitive title
            substring (first match in corpus order), "auto" for id then title.

    Returns:
        The matching book.

    Raises:
        ValueError: If match is unknown or the selector is blank.
        TargetNotFoundError: If nothing matches.
    """
    if match not in MATCH_MODES:
        raise ValueError(f"match must be one of {MATCH_MODES}, got {match!r}")
    if isinstance(selector, str) and not selector.strip():
        raise ValueError("selector must not be blank")

    target: Book | None = None
    if match in ("auto", "id"):
        target = _find_by_id(corpus, selector)
    if target is None and match in ("auto", "title"):
        target = _find_by_title(corpus, selector)

    if target is None:
        logger.warning("target_not_found", selector=str(selector), match=match)
        raise TargetNotFoundError(selector)
    return target


# =============================================================================
# Malformed-Book Policy
# =============================================================================


def partition_malformed(
    corpus: Sequence[Book],
    policy: MalformedBookPolicy = MalformedBookPolicy.EXCLUDE,
) -> tuple[list[Book], list[Book]]:
    """Apply the malformed-book policy to the whole corpus.

    Args:
        corpus: Books in corpus order.
        policy: EXCLUDE drops books without genre data; ZERO_FILL keeps them.

    Returns:
        Tuple of (books to vectorize, excluded books), both in corpus order.
    """
    if policy is MalformedBookPolicy.ZERO_FILL:
        return list(corpus), []

    kept: list[Book] = []
    excluded: list[Book] = []
    for book in corpus:
        if book.is_malformed:
            logger.warning("malformed_book_skipped", book_id=str(book.id), title=book.title)
            excluded.append(book)
        else:
            kept.append(book)
    return kept, excluded


# =============================================================================
# Recommendation Pipeline
# =============================================================================


def build_feature_vectors(books: Sequence[Book]) -> list[dict[str, float]]:
    """Combined [title | genre | synopsis] vectors for every book.

    All vectors are built against the same corpus-wide vocabularies.
    """
    with pipeline_span("encode_genres"):
        _genre_vocabulary, genre_matrix = encode_corpus_genres(books)

    with pipeline_span("tfidf_titles"):
        title_vectors = compute_tfidf([book.title for book in books])
        title_vocabulary = sorted(collect_vocabulary(title_vectors))

    with pipeline_span("tfidf_synopses"):
        synopsis_vectors = compute_tfidf([book.synopsis for book in books])
        synopsis_vocabulary = sorted(collect_vocabulary(synopsis_vectors))

    with pipeline_span("combine"):
        return [
            combine(
                title_vectors[index],
                genre_matrix[index].tolist(),
                synopsis_vectors[index],
                title_vocabulary,
                synopsis_vocabulary,
            )
            for index in range(len(books))
        ]


def recommend(
    corpus: Sequence[Book],
    selector: int | str,
    top_n: int = DEFAULT_TOP_N,
    *,
    match: MatchMode = "auto",
    policy: MalformedBookPolicy = MalformedBookPolicy.EXCLUDE,
) -> Recommendation:
    """Recommend the books most similar to a target book.

    Args:
        corpus: Immutable snapshot of all books, in corpus order.
        selector: Target book id or title fragment.
        top_n: Maximum number of recommendations (positive).
        match: How to interpret the selector, see select_target().
        policy: Treatment of books without genre data.

    Returns:
        Recommendation with the target and up to top_n similar books.

    Raises:
        ValueError: If top_n is not positive or the selector is blank.
        EmptyCorpusError: If the corpus is empty.
        TargetNotFoundError: If the selector matches no book.
        MalformedBookError: If the target lacks genre data under EXCLUDE.
    """
    if top_n <= 0:
        raise ValueError(f"top_n must be positive, got {top_n}")

    start_time = time.perf_counter()

    with pipeline_span(corpus_size=len(corpus), top_n=top_n, match=match) as span:
        logger.info("recommend_start", corpus_size=len(corpus), top_n=top_n, match=match)

        if not corpus:
            raise EmptyCorpusError()

        target = select_target(corpus, selector, match)

        if policy is MalformedBookPolicy.EXCLUDE and target.is_malformed:
            raise MalformedBookError(target.id)

        books, excluded = partition_malformed(corpus, policy)

        logger.info(
            "target_resolved",
            book_id=str(target.id),
            title=target.title,
            excluded_count=len(excluded),
        )
        span.set_attribute("book_id", str(target.id))
        span.set_attribute("excluded_count", len(excluded))

        vectors = build_feature_vectors(books)
        target_index = next(index for index, book in enumerate(books) if book is target)
        target_vector = vectors[target_index]

        with pipeline_span("rank"):
            results = rank(target_vector, list(zip(books, vectors)), target.id, top_n)

    processing_time_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "recommend_complete",
        book_id=str(target.id),
        recommendation_count=len(results),
        processing_time_ms=round(processing_time_ms, 3),
    )

    return Recommendation(
        target=target,
        recommendations=tuple(results),
        excluded_ids=tuple(book.id for book in excluded),
    )
