"""Structured logging and OpenTelemetry tracing setup."""

from __future__ import annotations

import json as json_module
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from docrelay.config.settings import Settings

logger = logging.getLogger(__name__)

# Chatty third-party loggers kept at WARNING.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "groq")


# ---------------------------------------------------------------------------
# Structured logging
# ---------------------------------------------------------------------------
class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json_module.dumps(log_entry, ensure_ascii=False)


def make_formatter(log_format: str) -> logging.Formatter:
    """Create the formatter selected by ``LOG_FORMAT``."""
    if log_format == "json":
        return JSONFormatter()
    return logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")


def configure_logging(settings: Settings) -> None:
    """Set up root logging with console + optional rotating file output.

    Runs once per process: if the root logger already has handlers (test
    runners, uvicorn's own config) only the level is applied.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if root.handlers:
        return

    formatter = make_formatter(settings.LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=settings.LOG_FILE_MAX_BYTES,
            backupCount=settings.LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        logger.info("File logging enabled → %s", log_path.resolve())


# ---------------------------------------------------------------------------
# Tracing
# ---------------------------------------------------------------------------
def configure_telemetry(settings: Settings) -> trace.Tracer:
    """Set up the OpenTelemetry tracer provider and return a tracer."""
    resource = Resource.create({"service.name": settings.OTEL_SERVICE_NAME})
    provider = TracerProvider(resource=resource)

    exporter: SpanExporter
    if settings.OTEL_EXPORTER_ENDPOINT:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )

            exporter = OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_ENDPOINT)
            provider.add_span_processor(BatchSpanProcessor(exporter))
            logger.info("Using OTLP exporter → %s", settings.OTEL_EXPORTER_ENDPOINT)
        except ImportError:
            logger.warning(
                "opentelemetry-exporter-otlp-proto-grpc not installed; "
                "falling back to console exporter"
            )
            exporter = ConsoleSpanExporter()
            provider.add_span_processor(SimpleSpanProcessor(exporter))
    else:
        # No background thread, so nothing races stdout closing at shutdown.
        exporter = ConsoleSpanExporter()
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(settings.OTEL_SERVICE_NAME)
    logger.info("OpenTelemetry configured for service: %s", settings.OTEL_SERVICE_NAME)
    return tracer
