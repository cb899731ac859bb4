"""
Data model for the recommendation pipeline.

Book records arrive from an external persistence layer as an immutable
snapshot per call. Genre labels are kept in canonical form (trimmed,
case-folded, de-duplicated) so every downstream stage sees the same labels.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

# Feature key -> non-negative weight. Absent keys are implicitly zero.
SparseVector: TypeAlias = dict[str, float]

# Source record keys, in lookup order
_GENRE_KEYS: tuple[str, ...] = ("genre_labels", "genres", "genre_name", "genre")
_SYNOPSIS_KEYS: tuple[str, ...] = ("synopsis", "description")


def parse_genre_labels(raw: str | Iterable[str] | None) -> tuple[str, ...] | None:
    """Canonicalize genre labels from their source form.

    Comma-separated strings are split; every piece is trimmed and
    case-folded. Empty pieces and repeats are dropped, first-seen order kept.

    Args:
        raw: Comma-separated string, iterable of labels, or None.

    Returns:
        Tuple of canonical labels, or None when raw is None.

    Examples:
        >>> parse_genre_labels("Fiksi, Petualangan ,fiksi")
        ('fiksi', 'petualangan')
        >>> parse_genre_labels(" , ")
        ()
    """
    if raw is None:
        return None

    pieces: Iterable[str] = raw.split(",") if isinstance(raw, str) else raw

    labels: dict[str, None] = {}
    for piece in pieces:
        label = piece.strip().casefold()
        if label:
            labels.setdefault(label, None)
    return tuple(labels)


def _first_present(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


@dataclass(frozen=True)
class Book:
    """A book as seen by the recommender.

    Attributes:
        id: Unique, stable identifier
        title: Non-empty title text
        synopsis: Synopsis text, may be empty
        genre_labels: Canonical genre labels, or None when the source had none
    """

    id: int | str
    title: str
    synopsis: str = ""
    genre_labels: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError(f"Book {self.id!r} must have a non-empty title")
        if self.synopsis is None:
            object.__setattr__(self, "synopsis", "")
        object.__setattr__(self, "genre_labels", parse_genre_labels(self.genre_labels))

    @property
    def is_malformed(self) -> bool:
        """True when the book carries no usable genre label."""
        return not self.genre_labels

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Book:
        """Build a Book from a source record.

        Accepts the shapes produced by the persistence layer, e.g.
        ``{"id": 1, "title": ..., "synopsis": ..., "genre_name": "Fiksi, Drama"}``.

        Raises:
            KeyError: If id or title is missing
            ValueError: If the title is blank
        """
        return cls(
            id=record["id"],
            title=record["title"],
            synopsis=_first_present(record, _SYNOPSIS_KEYS) or "",
            genre_labels=_first_present(record, _GENRE_KEYS),
        )


@dataclass(frozen=True)
class SimilarityResult:
    """A candidate book with its cosine similarity to the target.

    Attributes:
        book: The recommended book
        score: Cosine similarity in [0.0, 1.0]
    """

    book: Book
    score: float


@dataclass(frozen=True)
class Recommendation:
    """Result of one recommendation request.

    Attributes:
        target: The resolved target book
        recommendations: Similar books, best first
        excluded_ids: Ids of malformed books left out of the corpus
    """

    target: Book
    recommendations: tuple[SimilarityResult, ...] = ()
    excluded_ids: tuple[int | str, ...] = ()
