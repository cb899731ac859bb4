"""
Book Recommender - Pipeline Tracing

Every recommendation opens a ``recommend`` span with one child span per
pipeline stage (``recommend.encode_genres``, ``recommend.tfidf_titles``,
``recommend.tfidf_synopses``, ``recommend.combine``, ``recommend.rank``).

Until configure_tracing() installs an SDK provider, OpenTelemetry hands out
its no-op tracer, so library callers pay nothing for the spans.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Final

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import Span

PIPELINE_SPAN: Final[str] = "recommend"

# Resolves to the real tracer once a provider is installed
_tracer = trace.get_tracer("book_recommender")

_provider: TracerProvider | None = None


def configure_tracing(
    service_name: str,
    service_version: str,
    console_export: bool = False,
) -> TracerProvider:
    """Install the process-wide tracer provider.

    OpenTelemetry allows a single global provider per process, so only the
    first call installs one. Every call returns the installed provider, to
    which callers may attach further span processors.

    Args:
        service_name: ``service.name`` resource attribute
        service_version: ``service.version`` resource attribute
        console_export: Print finished spans to stdout (development)
    """
    global _provider

    if _provider is not None:
        return _provider

    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: service_version})
    )
    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


@contextmanager
def pipeline_span(stage: str | None = None, **attributes: Any) -> Iterator[Span]:
    """Open the ``recommend`` span, or ``recommend.<stage>`` for a stage."""
    name = PIPELINE_SPAN if stage is None else f"{PIPELINE_SPAN}.{stage}"
    with _tracer.start_as_current_span(name, attributes=attributes or None) as span:
        yield span
