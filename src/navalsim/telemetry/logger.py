"""Logging helpers with optional OpenTelemetry export."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import TelemetryConfig

CONSOLE_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s "
    "| trace_id=%(otelTraceID)s span_id=%(otelSpanID)s"
)

_LOGGER: logging.Logger | None = None
_CONSOLE_HANDLER: logging.Handler | None = None
_OTLP_HANDLER_INSTALLED = False


class _OtelContextFilter(logging.Filter):
    """Fill in trace/span placeholders when no span context is attached."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if not hasattr(record, "otelTraceID"):
            record.otelTraceID = "-"
        if not hasattr(record, "otelSpanID"):
            record.otelSpanID = "-"
        return True


def get_logger(name: str = "navalsim") -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger(name)
    return _LOGGER


def configure_console_logging(level: str | int = logging.WARNING) -> logging.Handler:
    """Send package logs to stderr, keeping stdout for the rendered game."""
    global _CONSOLE_HANDLER
    package_logger = logging.getLogger("navalsim")
    package_logger.setLevel(level)
    if _CONSOLE_HANDLER is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(_OtelContextFilter())
        package_logger.addHandler(handler)
        _CONSOLE_HANDLER = handler
    _CONSOLE_HANDLER.setLevel(level)
    return _CONSOLE_HANDLER


def init_logging(config: TelemetryConfig) -> logging.Logger:
    logger = get_logger(config.service_name)
    try:
        from opentelemetry._logs import set_logger_provider
        from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
        from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
        from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
        from opentelemetry.sdk.resources import Resource
    except ImportError:  # pragma: no cover
        return logger

    provider = LoggerProvider(resource=Resource.create(config.resource()))
    if config.otlp_logs_endpoint:
        exporter = OTLPLogExporter(endpoint=config.otlp_logs_endpoint, insecure=True)
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    set_logger_provider(provider)

    handler = LoggingHandler(level=config.log_level, logger_provider=provider)
    _install_otlp_handler(handler)
    return logger


def _install_otlp_handler(handler: logging.Handler) -> None:
    """Attach the OTLP handler to the package logger once."""
    global _OTLP_HANDLER_INSTALLED
    if _OTLP_HANDLER_INSTALLED:
        return
    handler.addFilter(_OtelContextFilter())
    logging.getLogger("navalsim").addHandler(handler)
    _OTLP_HANDLER_INSTALLED = True
