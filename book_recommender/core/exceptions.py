"""
Book Recommender - Custom Exceptions

Anti-Patterns Avoided:
- #7, #13 (Exception Shadowing): Custom namespaced exceptions.
  Use BookRecommenderError subclasses instead of shadowing builtins like LookupError
"""

from __future__ import annotations


class BookRecommenderError(Exception):
    """Base exception for the book recommender.

    All custom exceptions inherit from this base class.
    """


class EmptyCorpusError(BookRecommenderError):
    """Raised when no books are available to recommend from.

    Terminal for the call: callers render "no books available" rather
    than an empty recommendation list.
    """

    def __init__(self, message: str = "No books available") -> None:
        super().__init__(message)


class TargetNotFoundError(BookRecommenderError):
    """Raised when the target selector matches no book in the corpus."""

    def __init__(self, selector: str | int) -> None:
        """Initialize TargetNotFoundError with the unmatched selector.

        Args:
            selector: Book id or title fragment that matched nothing
        """
        self.selector = selector
        super().__init__(f"No book found matching: {selector!r}")


class MalformedBookError(BookRecommenderError):
    """Raised when a book lacks the genre data needed for vectorization.

    Only surfaced for the target book; other malformed books are handled
    by the configured MalformedBookPolicy.
    """

    def __init__(self, book_id: str | int, reason: str = "no genre labels") -> None:
        """Initialize MalformedBookError.

        Args:
            book_id: Identifier of the malformed book
            reason: Short description of what is missing
        """
        self.book_id = book_id
        self.reason = reason
        super().__init__(f"Book {book_id!r} is malformed: {reason}")


class ConfigurationError(BookRecommenderError):
    """Raised when configuration is invalid or missing."""
