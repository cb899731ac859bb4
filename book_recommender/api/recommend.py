"""
Recommendation API Endpoints

POST /v1/recommendations                 - Recommend by id or title selector
POST /v1/recommendations/search?title=   - Recommend by title fragment
POST /v1/recommendations/{book_id}       - Recommend by book id

The service is stateless: every request carries the full book corpus, and
the pipeline is rebuilt from it on every call.

Patterns Applied:
- FastAPI router with Pydantic request/response models
- Settings via dependency injection (overridable in tests)
- Domain exceptions mapped to HTTP status codes
"""

from __future__ import annotations

import time
from typing import Annotated, Final, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import AliasChoices, BaseModel, Field, field_validator

from book_recommender.core.config import Settings, get_settings
from book_recommender.core.exceptions import (
    EmptyCorpusError,
    MalformedBookError,
    TargetNotFoundError,
)
from book_recommender.core.logging import bind_request_context, clear_request_context, get_logger
from book_recommender.models.book import Book, Recommendation, SimilarityResult
from book_recommender.recommender.orchestrator import recommend

logger = get_logger(__name__)

# =============================================================================
# Constants (S1192 compliance - no magic values)
# =============================================================================

API_TAG: Final[str] = "recommendations"
SIMILARITY_METHOD_TFIDF: Final[str] = "tfidf"
MIN_TOP_N: Final[int] = 1
HTTP_UNPROCESSABLE: Final[int] = 422


# =============================================================================
# Request/Response Models
# =============================================================================


class BookInput(BaseModel):
    """A book record supplied by the caller.

    Genres may arrive comma-separated (``"Fiksi, Drama"``) or as a list, under
    ``genre_labels``, ``genre_name``, ``genres`` or ``genre``.
    """

    id: int | str = Field(..., description="Unique book identifier")
    title: str = Field(..., min_length=1, description="Book title")
    synopsis: str | None = Field(
        default=None,
        validation_alias=AliasChoices("synopsis", "description"),
        description="Synopsis text",
    )
    genre_labels: str | list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("genre_labels", "genre_name", "genres", "genre"),
        description="Genre labels, comma-separated or as a list",
    )

    @field_validator("title")
    @classmethod
    def validate_title_not_blank(cls, v: str) -> str:
        """Reject whitespace-only titles."""
        if not v.strip():
            raise ValueError("title cannot be blank")
        return v

    def to_book(self) -> Book:
        """Convert to the pipeline's Book model."""
        return Book(
            id=self.id,
            title=self.title,
            synopsis=self.synopsis or "",
            genre_labels=self.genre_labels,
        )


class BookOutput(BaseModel):
    """A book as returned to the caller."""

    id: int | str
    title: str
    synopsis: str
    genre_labels: list[str] | None

    @classmethod
    def from_book(cls, book: Book) -> BookOutput:
        return cls(
            id=book.id,
            title=book.title,
            synopsis=book.synopsis,
            genre_labels=list(book.genre_labels) if book.genre_labels is not None else None,
        )


class RecommendationItem(BaseModel):
    """A recommended book with its similarity score."""

    book: BookOutput
    score: float = Field(..., ge=0.0, le=1.0, description="Cosine similarity (0.0 to 1.0)")


class CorpusRequest(BaseModel):
    """Request body carrying the corpus and an optional top_n."""

    books: list[BookInput] = Field(..., description="Full book corpus, in order")
    top_n: int | None = Field(
        default=None,
        ge=MIN_TOP_N,
        description="Maximum number of recommendations (default from settings)",
    )


class RecommendationRequest(CorpusRequest):
    """Request body for the selector-based endpoint."""

    selector: int | str = Field(..., description="Book id or title fragment")
    match: Literal["auto", "id", "title"] = Field(
        default="auto",
        description='"id", "title" or "auto" (id first, then title)',
    )


class RecommendationResponse(BaseModel):
    """Response from the recommendation endpoints."""

    target: BookOutput
    recommendations: list[RecommendationItem] = Field(
        ...,
        description="Similar books sorted by score (descending)",
    )
    excluded_ids: list[int | str] = Field(
        default_factory=list,
        description="Books left out for missing genre data",
    )
    method: str = Field(default=SIMILARITY_METHOD_TFIDF, description="Similarity method")
    processing_time_ms: float = Field(..., ge=0, description="Processing time in milliseconds")


# =============================================================================
# Router
# =============================================================================

recommend_router = APIRouter(prefix="/v1", tags=[API_TAG])

SettingsDep = Annotated[Settings, Depends(get_settings)]


def _to_item(result: SimilarityResult) -> RecommendationItem:
    return RecommendationItem(book=BookOutput.from_book(result.book), score=result.score)


def _run_recommendation(
    request: CorpusRequest,
    selector: int | str,
    match: Literal["auto", "id", "title"],
    settings: Settings,
) -> RecommendationResponse:
    """Run the pipeline and translate domain errors into HTTP errors.

    Keeps each endpoint under the S3776 cognitive complexity limit.
    """
    top_n = request.top_n if request.top_n is not None else settings.default_top_n
    if top_n > settings.max_top_n:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE,
            detail=f"top_n must be at most {settings.max_top_n}",
        )

    bind_request_context(selector=selector, match=match, corpus_size=len(request.books))

    start_time = time.perf_counter()

    try:
        result: Recommendation = recommend(
            [book.to_book() for book in request.books],
            selector,
            top_n,
            match=match,
            policy=settings.malformed_policy,
        )
    except EmptyCorpusError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except TargetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (MalformedBookError, ValueError) as e:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE,
            detail=str(e),
        ) from e
    except Exception as e:
        logger.error("recommendation_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get recommendations: {e!s}",
        ) from e
    finally:
        clear_request_context()

    processing_time_ms = (time.perf_counter() - start_time) * 1000

    return RecommendationResponse(
        target=BookOutput.from_book(result.target),
        recommendations=[_to_item(r) for r in result.recommendations],
        excluded_ids=list(result.excluded_ids),
        processing_time_ms=processing_time_ms,
    )


@recommend_router.post("/recommendations", response_model=RecommendationResponse)
def recommend_by_selector(
    request: RecommendationRequest,
    settings: SettingsDep,
) -> RecommendationResponse:
    """Recommend books similar to the book matched by a selector.

    Example:
        POST /v1/recommendations
        {
            "books": [
                {"id": 1, "title": "Kucing Anjing", "genre_name": "Fabel"},
                {"id": 2, "title": "Kucing Burung", "genre_name": "Fabel"}
            ],
            "selector": "kucing anjing",
            "top_n": 5
        }
    """
    return _run_recommendation(request, request.selector, request.match, settings)


@recommend_router.post("/recommendations/search", response_model=RecommendationResponse)
def recommend_by_title(
    request: CorpusRequest,
    settings: SettingsDep,
    title: Annotated[str, Query(min_length=1, description="Title fragment")],
) -> RecommendationResponse:
    """Recommend books similar to the first book whose title contains `title`."""
    return _run_recommendation(request, title, "title", settings)


@recommend_router.post("/recommendations/{book_id}", response_model=RecommendationResponse)
def recommend_by_id(
    book_id: str,
    request: CorpusRequest,
    settings: SettingsDep,
) -> RecommendationResponse:
    """Recommend books similar to the book with the given id."""
    return _run_recommendation(request, book_id, "id", settings)
