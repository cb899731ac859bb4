"""
Integration tests for the recommendation endpoints.

Exercises the full request path through FastAPI TestClient:
- POST /v1/recommendations
- POST /v1/recommendations/search?title=
- POST /v1/recommendations/{book_id}
"""

from __future__ import annotations

from typing import Any

import pytest
import structlog
from fastapi.testclient import TestClient

from book_recommender.api import recommend as recommend_api
from book_recommender.core.config import MalformedBookPolicy, Settings, get_settings
from book_recommender.main import app
from book_recommender.models.book import Recommendation
from book_recommender.recommender.orchestrator import recommend

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def books() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "title": "Laskar Pelangi",
            "synopsis": "Sepuluh anak sekolah miskin berjuang meraih mimpi di Belitung.",
            "genre_labels": "Drama, Pendidikan",
        },
        {
            "id": 2,
            "title": "Sang Pemimpi",
            "synopsis": "Dua sahabat dari Belitung mengejar mimpi sekolah ke Paris.",
            "genre_labels": ["Drama", "Pendidikan"],
        },
        {
            "id": 3,
            "title": "Si Kancil dan Buaya",
            "synopsis": "Kancil cerdik menipu buaya untuk menyeberang sungai.",
            "genre_labels": "Fabel",
        },
        {
            "id": 4,
            "title": "Hantu Rumah Tua",
            "description": "Suara aneh terdengar setiap malam.",
            "genre_name": "Horor",
        },
    ]


@pytest.fixture
def zero_fill_settings():
    """Override settings so malformed books are kept with zero genres."""
    app.dependency_overrides[get_settings] = lambda: Settings(
        malformed_policy=MalformedBookPolicy.ZERO_FILL
    )
    yield
    app.dependency_overrides.clear()


# =============================================================================
# Selector Endpoint
# =============================================================================


class TestRecommendBySelector:
    """POST /v1/recommendations"""

    def test_returns_200(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        response = client.post("/v1/recommendations", json={"books": books, "selector": 1})
        assert response.status_code == 200

    def test_response_shape(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        data = client.post(
            "/v1/recommendations", json={"books": books, "selector": "laskar"}
        ).json()

        assert data["target"]["id"] == 1
        assert data["target"]["genre_labels"] == ["drama", "pendidikan"]
        assert data["method"] == "tfidf"
        assert data["processing_time_ms"] >= 0
        assert data["excluded_ids"] == []

    def test_most_similar_first(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        data = client.post("/v1/recommendations", json={"books": books, "selector": 1}).json()
        ids = [item["book"]["id"] for item in data["recommendations"]]
        assert ids[0] == 2
        assert 1 not in ids

    def test_scores_sorted_and_bounded(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        data = client.post("/v1/recommendations", json={"books": books, "selector": 1}).json()
        scores = [item["score"] for item in data["recommendations"]]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= score <= 1.0 for score in scores)

    def test_top_n_limits_results(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        data = client.post(
            "/v1/recommendations", json={"books": books, "selector": 1, "top_n": 1}
        ).json()
        assert len(data["recommendations"]) == 1

    def test_description_and_genre_name_aliases(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        data = client.post("/v1/recommendations", json={"books": books, "selector": 4}).json()
        assert data["target"]["synopsis"] == "Suara aneh terdengar setiap malam."
        assert data["target"]["genre_labels"] == ["horor"]


# =============================================================================
# Id and Title Endpoints
# =============================================================================


class TestRecommendById:
    """POST /v1/recommendations/{book_id}"""

    def test_path_id_matches_integer_id(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        response = client.post("/v1/recommendations/3", json={"books": books})
        assert response.status_code == 200
        assert response.json()["target"]["id"] == 3

    def test_unknown_id_is_404(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        response = client.post("/v1/recommendations/99", json={"books": books})
        assert response.status_code == 404


class TestRecommendByTitle:
    """POST /v1/recommendations/search?title="""

    def test_title_fragment(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        response = client.post(
            "/v1/recommendations/search", params={"title": "PEMIMPI"}, json={"books": books}
        )
        assert response.status_code == 200
        assert response.json()["target"]["id"] == 2

    def test_missing_title_is_422(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        response = client.post("/v1/recommendations/search", json={"books": books})
        assert response.status_code == 422


# =============================================================================
# Error Mapping
# =============================================================================


class TestErrorMapping:
    """Domain errors become distinct HTTP status codes."""

    def test_empty_corpus_is_404(self, client: TestClient) -> None:
        response = client.post("/v1/recommendations", json={"books": [], "selector": 1})
        assert response.status_code == 404
        assert "No books available" in response.json()["detail"]

    def test_target_not_found_is_404(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        response = client.post(
            "/v1/recommendations", json={"books": books, "selector": "tidak ada"}
        )
        assert response.status_code == 404

    @pytest.mark.parametrize("top_n", [0, -1, 51])
    def test_top_n_out_of_range_is_422(
        self, client: TestClient, books: list[dict[str, Any]], top_n: int
    ) -> None:
        response = client.post(
            "/v1/recommendations", json={"books": books, "selector": 1, "top_n": top_n}
        )
        assert response.status_code == 422

    def test_blank_title_is_422(self, client: TestClient) -> None:
        response = client.post(
            "/v1/recommendations",
            json={"books": [{"id": 1, "title": "   "}], "selector": 1},
        )
        assert response.status_code == 422

    def test_blank_selector_is_422(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        response = client.post("/v1/recommendations", json={"books": books, "selector": " "})
        assert response.status_code == 422

    def test_malformed_target_is_422(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        corpus = [*books, {"id": 5, "title": "Tanpa Genre"}]
        response = client.post("/v1/recommendations", json={"books": corpus, "selector": 5})
        assert response.status_code == 422
        assert "no genre labels" in response.json()["detail"]


# =============================================================================
# Malformed-Book Policy
# =============================================================================


class TestMalformedPolicy:
    """Books without genres are excluded by default, kept under zero_fill."""

    def test_excluded_by_default(self, client: TestClient, books: list[dict[str, Any]]) -> None:
        corpus = [*books, {"id": 5, "title": "Laskar Tanpa Genre"}]
        data = client.post(
            "/v1/recommendations", json={"books": corpus, "selector": 1, "top_n": 10}
        ).json()
        assert data["excluded_ids"] == [5]
        assert 5 not in [item["book"]["id"] for item in data["recommendations"]]

    @pytest.mark.usefixtures("zero_fill_settings")
    def test_zero_fill_keeps_book(
        self, client: TestClient, books: list[dict[str, Any]]
    ) -> None:
        corpus = [*books, {"id": 5, "title": "Laskar Tanpa Genre"}]
        data = client.post(
            "/v1/recommendations", json={"books": corpus, "selector": 5, "top_n": 10}
        ).json()
        assert data["target"]["genre_labels"] is None
        assert data["excluded_ids"] == []
        assert [item["book"]["id"] for item in data["recommendations"]][0] == 1


# =============================================================================
# Request Log Context
# =============================================================================


class TestRequestLogContext:
    """Selector and match mode are bound for every event of the request."""

    def test_context_bound_while_pipeline_runs(
        self,
        client: TestClient,
        books: list[dict[str, Any]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        seen: dict[str, Any] = {}

        def recording_recommend(*args: Any, **kwargs: Any) -> Recommendation:
            seen.update(structlog.contextvars.get_contextvars())
            return recommend(*args, **kwargs)

        monkeypatch.setattr(recommend_api, "recommend", recording_recommend)
        response = client.post("/v1/recommendations/2", json={"books": books})

        assert response.status_code == 200
        assert seen == {"selector": "2", "match": "id", "corpus_size": "4"}
