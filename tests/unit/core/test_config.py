"""Unit tests for settings, logging, exceptions and the health service identity."""

from __future__ import annotations

import pytest
import structlog
from pydantic import ValidationError

from book_recommender.api import health
from book_recommender.api.health import HealthService
from book_recommender.core.config import MalformedBookPolicy, Settings, get_settings
from book_recommender.core.exceptions import (
    BookRecommenderError,
    ConfigurationError,
    EmptyCorpusError,
    MalformedBookError,
    TargetNotFoundError,
)
from book_recommender.core.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    reset_logging,
    service_info_processor,
)

# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Pydantic Settings with BOOKREC_ prefix."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.service_name == "book-recommender"
        assert settings.default_top_n == 5
        assert settings.malformed_policy is MalformedBookPolicy.EXCLUDE

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOKREC_MALFORMED_POLICY", "zero_fill")
        monkeypatch.setenv("BOOKREC_DEFAULT_TOP_N", "3")
        settings = get_settings()
        assert settings.malformed_policy is MalformedBookPolicy.ZERO_FILL
        assert settings.default_top_n == 3

    def test_invalid_policy_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOKREC_MALFORMED_POLICY", "ignore")
        with pytest.raises(ValidationError):
            get_settings()

    def test_default_above_max_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOKREC_DEFAULT_TOP_N", "20")
        monkeypatch.setenv("BOOKREC_MAX_TOP_N", "10")
        with pytest.raises(ConfigurationError, match="exceeds"):
            get_settings()

    def test_non_positive_default_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOKREC_DEFAULT_TOP_N", "0")
        with pytest.raises(ConfigurationError, match="positive"):
            get_settings()

    def test_unrelated_env_vars_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOOKREC_SOMETHING_ELSE", "x")
        assert get_settings().port == 8085


# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    """Namespaced exception hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [
            EmptyCorpusError(),
            TargetNotFoundError("judul"),
            MalformedBookError(3),
            ConfigurationError("bad"),
        ],
    )
    def test_all_derive_from_base(self, error: Exception) -> None:
        assert isinstance(error, BookRecommenderError)

    def test_target_not_found_carries_selector(self) -> None:
        error = TargetNotFoundError("laskar")
        assert error.selector == "laskar"
        assert "laskar" in str(error)

    def test_malformed_book_carries_id(self) -> None:
        error = MalformedBookError(42)
        assert error.book_id == 42
        assert "no genre labels" in str(error)

    def test_empty_corpus_message(self) -> None:
        assert str(EmptyCorpusError()) == "No books available"


# =============================================================================
# Logging
# =============================================================================


class TestLogging:
    """One-time structlog configuration."""

    def test_configure_is_idempotent(self) -> None:
        reset_logging()
        configure_logging(service_name="book-recommender", log_level="DEBUG", json_output=False)
        configure_logging(service_name="other", log_level="INFO", json_output=True)
        logger = get_logger("test")
        logger.info("logging_configured", check=True)
        reset_logging()

    def test_get_logger_returns_bound_logger(self) -> None:
        logger = get_logger(__name__)
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_service_info_uses_configured_name(self) -> None:
        add_service_info = service_info_processor("katalog-sekolah", "staging")
        event = add_service_info(None, "info", {"event": "recommend_start"})
        assert event["service"] == "katalog-sekolah"
        assert event["environment"] == "staging"

    def test_service_info_keeps_explicit_values(self) -> None:
        add_service_info = service_info_processor("katalog-sekolah", "staging")
        event = add_service_info(None, "info", {"event": "x", "service": "worker"})
        assert event["service"] == "worker"


class TestRequestContext:
    """Per-request values merged into every event."""

    def teardown_method(self) -> None:
        clear_request_context()

    def test_bind_stringifies_values(self) -> None:
        bind_request_context(selector=7, match="id", corpus_size=3)
        assert structlog.contextvars.get_contextvars() == {
            "selector": "7",
            "match": "id",
            "corpus_size": "3",
        }

    def test_bind_replaces_previous_context(self) -> None:
        bind_request_context(selector="laskar")
        bind_request_context(book_id=2)
        assert structlog.contextvars.get_contextvars() == {"book_id": "2"}

    def test_none_values_skipped(self) -> None:
        bind_request_context(selector="laskar", match=None)
        assert structlog.contextvars.get_contextvars() == {"selector": "laskar"}

    def test_clear(self) -> None:
        bind_request_context(selector="laskar")
        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}


# =============================================================================
# Health Service
# =============================================================================


class TestHealthServiceIdentity:
    """Health responses report the configured service identity."""

    def test_reports_given_service_name(self) -> None:
        service = HealthService("katalog-sekolah", "9.9.9")
        assert service.check_health() == {
            "status": "healthy",
            "version": "9.9.9",
            "service": "katalog-sekolah",
        }

    def test_shared_instance_built_from_settings(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BOOKREC_SERVICE_NAME", "katalog-sekolah")
        monkeypatch.setattr(health, "_health_service", None)
        assert health.get_health_service().check_health()["service"] == "katalog-sekolah"
