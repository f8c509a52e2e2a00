"""OpenTelemetry tracing for the solution pipeline.

No exporter is configured here. Spans are still created in-process, so an
environment-provided provider (or a test exporter) sees every phase.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import Span

from solution_graph import __version__


@lru_cache()
def init_tracing(service_name: str) -> None:
    # Keep a provider configured by the environment.
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return
    resource = Resource.create({"service.name": service_name, "service.version": __version__})
    trace.set_tracer_provider(TracerProvider(resource=resource))


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


@contextmanager
def phase_span(tracer: trace.Tracer, phase: str, **attributes: Any) -> Iterator[Span]:
    """Span for one pipeline phase; ``None`` attributes are dropped."""

    with tracer.start_as_current_span(f"solution_graph.{phase}") as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value)
        yield span
