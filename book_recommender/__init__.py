"""Book Recommender: content-based book recommendations.

Ranks a corpus of books by cosine similarity to a target book over
concatenated title TF-IDF, genre multi-hot and synopsis TF-IDF features.
"""

from book_recommender.core.config import MalformedBookPolicy
from book_recommender.core.exceptions import (
    BookRecommenderError,
    EmptyCorpusError,
    MalformedBookError,
    TargetNotFoundError,
)
from book_recommender.models.book import Book, Recommendation, SimilarityResult
from book_recommender.recommender.orchestrator import recommend, select_target

__version__ = "0.1.0"
__all__ = [
    "Book",
    "BookRecommenderError",
    "EmptyCorpusError",
    "MalformedBookError",
    "MalformedBookPolicy",
    "Recommendation",
    "SimilarityResult",
    "TargetNotFoundError",
    "__version__",
    "recommend",
    "select_target",
]
