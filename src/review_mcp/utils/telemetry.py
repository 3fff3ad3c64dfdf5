"""Tracing for review-mcp on top of the OpenTelemetry API.

Modules take a tracer once at import time::

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("mcp.dispatch") as span:
        span.set_attribute(ATTR_METHOD, request.method)

Until :func:`configure_telemetry` installs an SDK tracer provider, every
span is a no-op, so the ``otel`` extra is only needed when traces are
actually exported.
"""

from __future__ import annotations

import sys
from typing import Any

from opentelemetry import trace

# Span attribute keys
ATTR_METHOD = "mcp.method"
ATTR_REQUEST_ID = "mcp.request.id"
ATTR_ERROR_CODE = "mcp.error.code"
ATTR_TOOL_NAME = "mcp.tool.name"
ATTR_FALLBACK = "mcp.tool.fallback"
ATTR_FALLBACK_REASON = "mcp.tool.fallback_reason"

_INSTRUMENTATION_NAME = "review_mcp"
_OTEL_HINT = "Install it with: pip install review-mcp[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Tracer for *name*; a no-op one while no SDK provider is installed."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "review-mcp",
    console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider as the global provider.

    Args:
        service_name: Value of the ``service.name`` resource attribute.
        console: Print finished spans as JSON on stderr. stdout is left
            alone because the stdio transport owns it.
        otlp_endpoint: Also ship spans over OTLP/gRPC to this endpoint.

    Raises:
        ImportError: ``opentelemetry-sdk`` is missing, or an OTLP endpoint
            was given without ``opentelemetry-exporter-otlp``.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required to export traces. {_OTEL_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    for processor in _span_processors(console, otlp_endpoint):
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)


def _span_processors(console: bool, otlp_endpoint: str | None) -> list[Any]:
    from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    processors: list[Any] = []
    if console:
        processors.append(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
                OTLPSpanExporter,
            )
        except ImportError as exc:
            msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_OTEL_HINT}"
            raise ImportError(msg) from exc
        processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    return processors
