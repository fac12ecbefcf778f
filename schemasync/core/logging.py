"""Structured logging configuration for schemasync."""

import logging
import sys

from json_log_formatter import JSONFormatter

# Record attributes rendered by StructuredFormatter, in display order
CONTEXT_FIELDS = ("source_id", "destination_id", "destination_type", "namespace")


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure logging for schemasync.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use normal format
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("schemasync")
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter()

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def warehouse_context(warehouse) -> dict[str, str]:
    """Build the ``extra`` mapping that tags a log record with its sync target."""
    return {
        "source_id": warehouse.source_id,
        "destination_id": warehouse.destination_id,
        "destination_type": warehouse.destination_type,
        "namespace": warehouse.namespace,
    }


class StructuredFormatter(logging.Formatter):
    """Structured formatter that adds warehouse context to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with context."""
        context = getattr(record, "context", {})

        parts = [f"[{record.levelname}]"]

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                parts.append(f"{name}={getattr(record, name)}")

        for key, value in context.items():
            parts.append(f"{key}={value}")

        parts.append(record.getMessage())

        return " ".join(parts)
