"""Public observability primitives: structured logging with redaction."""

from objectenvy.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    LogRedactor,
    configure_logging,
    default_log_redactor,
    redact_mapping,
)

__all__ = [
    "LogRedactor",
    "LoggingConfig",
    "LoggingHandle",
    "configure_logging",
    "default_log_redactor",
    "redact_mapping",
]
