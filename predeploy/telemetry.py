"""
Tracing and log setup for a single pre-deploy action run.

Provides:
  - configure_telemetry()    – call once at startup
  - resource_attributes()    – OTel resource describing the workflow run
  - get_tracer()             – returns the action-wide Tracer
  - new_correlation_id()     – UUID-based correlation ID generator

Spans are exported over OTLP when OTEL_EXPORTER_OTLP_ENDPOINT is set, or to
the console when PREDEPLOY_TRACE_CONSOLE=true; otherwise they are dropped.
Log lines are JSON objects tagged with the workflow run id.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Mapping

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)

from predeploy import __version__

_TRACER_NAME = "predeploy"
_configured = False

# Workflow environment variable -> resource attribute.
_GITHUB_ATTRIBUTES = {
    "GITHUB_REPOSITORY": "github.repository",
    "GITHUB_RUN_ID": "github.run_id",
    "GITHUB_RUN_ATTEMPT": "github.run_attempt",
    "GITHUB_WORKFLOW": "github.workflow",
    "GITHUB_SHA": "github.sha",
    "GITHUB_REF": "github.ref",
}

_LOG_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
    '"run_id":"%(run_id)s","message":"%(message)s"}'
)


def resource_attributes(
    service_name: str = "predeploy-status", environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    env = os.environ if environ is None else environ
    attributes = {"service.name": service_name, "service.version": __version__}
    for var, key in _GITHUB_ATTRIBUTES.items():
        if env.get(var):
            attributes[key] = env[var]
    return attributes


def _span_exporter(environ: Mapping[str, str]) -> SpanExporter | None:
    otlp_endpoint = environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )
            return OTLPSpanExporter(endpoint=otlp_endpoint)
        except ImportError:
            return ConsoleSpanExporter()
    if environ.get("PREDEPLOY_TRACE_CONSOLE", "false").lower() in ("true", "1", "yes"):
        return ConsoleSpanExporter()
    return None


class _RunIdFilter(logging.Filter):
    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


def configure_telemetry(service_name: str = "predeploy-status") -> None:
    """Install the tracer provider and JSON log handler (idempotent)."""
    global _configured
    if _configured:
        return

    provider = TracerProvider(resource=Resource.create(resource_attributes(service_name)))
    exporter = _span_exporter(os.environ)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%SZ"))
    handler.addFilter(_RunIdFilter(os.getenv("GITHUB_RUN_ID", "local")))
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        handlers=[handler],
    )

    _configured = True


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(_TRACER_NAME)


def new_correlation_id() -> str:
    return str(uuid.uuid4())
