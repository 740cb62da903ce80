"""OpenTelemetry tracing helpers for chatwire.

Provides a thin wrapper around the OpenTelemetry API so the rest of the
codebase can call ``get_tracer()`` without caring whether the SDK is
installed. When the SDK is *not* configured the API returns no-op
implementations.

Usage::

    from chatwire.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("chat.stream") as span:
        span.set_attribute(ATTR_MODEL, "claude-3-5-sonnet-20241022")

To activate real tracing, call :func:`configure_telemetry` once at startup
(requires the ``otel`` extra: ``pip install chatwire[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys used throughout chatwire instrumentation
# ---------------------------------------------------------------------------

ATTR_MODEL = "chatwire.model"
ATTR_PROVIDER = "chatwire.provider"
ATTR_STREAM = "chatwire.stream"
ATTR_MESSAGE_COUNT = "chatwire.messages"
ATTR_DELTA_COUNT = "chatwire.deltas"
ATTR_TOOLS_ATTACHED = "chatwire.tools_attached"
ATTR_CANCELLED = "chatwire.cancelled"

_INSTRUMENTATION_NAME = "chatwire"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "chatwire",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Configure OpenTelemetry tracing (requires ``chatwire[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to stdout.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install chatwire[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    """Attach the console exporter (JSON to stdout)."""
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter()))


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    """Attach the OTLP gRPC exporter."""
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
            OTLPSpanExporter,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install chatwire[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
