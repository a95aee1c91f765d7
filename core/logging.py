"""
core/logging.py - Structured logging.

All logs include:
- timestamp (ISO 8601)
- level
- logger
- message
- context (code, subject, phase, counts, etc.)

Contextual fields are passed only via extra={"context": {...}}.
Output is either one JSON object per line or human-readable text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from core.constants import Severity
from core.models import Finding

# Global context that gets added to all log entries
_global_context: dict[str, Any] = {}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-01-04T12:00:00.000+00:00",
        "level": "ERROR",
        "logger": "registry.orchestrator",
        "message": "[BAD_CHECKSUM] Invalid EIP-55 checksum ...",
        "context": {
            "code": "BAD_CHECKSUM",
            "subject": "0x...",
            "phase": "VALIDATING_TOKENS"
        }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {}
        context.update(_global_context)

        if hasattr(record, "context") and record.context:
            context.update(record.context)

        if record.exc_info:
            context["exception"] = self.formatException(record.exc_info)

        if context:
            log_entry["context"] = context

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        base = f"{timestamp} | {record.levelname:<8} | {record.name} | {record.getMessage()}"

        if hasattr(record, "context") and record.context:
            ctx = {k: v for k, v in record.context.items() if k != "details"}
            ctx_str = ", ".join(f"{k}={v}" for k, v in list(ctx.items())[:3])
            if len(ctx) > 3:
                ctx_str += f", ... (+{len(ctx) - 3} more)"
            if ctx_str:
                base += f" | {ctx_str}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds context to all log entries.
    """

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        context = {**self.extra, **extra.get("context", {})}

        kwargs["extra"] = {"context": context}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """
    Set global context that gets added to all JSON log entries.

    Example:
        set_global_context(service="registry-gate", version="1.0.0")
    """
    _global_context.update(kwargs)


def clear_global_context() -> None:
    """Clear global logging context."""
    _global_context.clear()


def get_logger(name: str, **context: Any) -> ContextAdapter:
    """
    Get a logger with optional default context.

    Args:
        name: Logger name (e.g., "registry.orchestrator")
        **context: Default context for all log entries from this logger

    Returns:
        ContextAdapter with structured logging
    """
    logger = logging.getLogger(name)
    return ContextAdapter(logger, context)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: One JSON object per line instead of text
        log_file: Optional file path for logging (always JSON)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def log_finding(logger: ContextAdapter, finding: Finding) -> None:
    """Log a finding at the level matching its severity."""
    level = logging.ERROR if finding.severity == Severity.ERROR else logging.WARNING
    context: dict[str, Any] = {
        "code": finding.code.value,
        "subject": finding.subject,
        "phase": finding.phase,
    }
    if finding.details:
        context["details"] = finding.details
    logger.log(
        level,
        f"[{finding.code.value}] {finding.message}",
        extra={"context": context},
    )
