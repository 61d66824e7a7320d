"""Logging setup for the CLI: structlog routed into one stdlib sink.

Records render either as ``LEVEL logger: event key=value ...`` text or as one
JSON object per line. Event fields pass through a redactor before rendering;
the default one masks values whose key names a secret, which is how
environment variables and config keys carry credentials.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final, TextIO

import structlog

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
LogRedactor = Callable[[JSONValue], JSONValue]

_REDACTED: Final[str] = "***REDACTED***"

# Matched against lowercased keys with "_" and "-" removed, so DB_PASSWORD,
# dbPassword and db-password all hit "password".
_SECRET_KEY_FRAGMENTS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "passw",
    "passphrase",
    "apikey",
    "authorization",
    "credential",
    "privatekey",
)

# Anything a bare LogRecord carries is bookkeeping, not an event field.
_RECORD_ATTRIBUTES: Final[frozenset[str]] = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Where and how CLI log records are written."""

    level: int | str = "WARNING"
    json_lines: bool = False
    logger_name: str = "objectenvy"
    stream: TextIO | None = None
    redactor: LogRedactor | None = None


class _EventFormatter(logging.Formatter):
    def __init__(self, *, json_lines: bool, redactor: LogRedactor) -> None:
        super().__init__("%(levelname)s %(name)s: %(message)s")
        self._json_lines = json_lines
        self._redactor = redactor

    def format(self, record: logging.LogRecord) -> str:
        fields = self._redactor(
            {
                key: _jsonable(value)
                for key, value in record.__dict__.items()
                if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
            }
        )
        if not self._json_lines:
            line = super().format(record)
            if isinstance(fields, dict) and fields:
                line += " " + " ".join(
                    f"{key}={json.dumps(fields[key], sort_keys=True, ensure_ascii=False)}"
                    for key in sorted(fields)
                )
            return line

        message = self._redactor(record.getMessage())
        event: dict[str, JSONValue] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message if isinstance(message, str) else json.dumps(message),
        }
        if fields:
            event["fields"] = fields
        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class LoggingHandle:
    """The installed sink; ``shutdown()`` detaches it and resets structlog."""

    def __init__(self, *, logger: logging.Logger, handler: logging.Handler) -> None:
        self.logger = logger
        self._handler = handler
        self.is_shutdown = False

    def shutdown(self) -> None:
        if self.is_shutdown:
            return
        self._handler.flush()
        self.logger.removeHandler(self._handler)
        structlog.reset_defaults()
        self.is_shutdown = True


def configure_logging(config: LoggingConfig | None = None) -> LoggingHandle:
    """Install a single formatted handler and route structlog through it."""

    config = config if config is not None else LoggingConfig()
    level = _parse_log_level(config.level)

    handler = logging.StreamHandler(config.stream if config.stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        _EventFormatter(
            json_lines=config.json_lines,
            redactor=config.redactor if config.redactor is not None else default_log_redactor,
        )
    )

    logger = logging.getLogger(config.logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for previous in list(logger.handlers):
        logger.removeHandler(previous)
        previous.close()
    logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return LoggingHandle(logger=logger, handler=handler)


def default_log_redactor(value: JSONValue) -> JSONValue:
    """Mask values stored under secret-looking keys, at any depth."""
    if isinstance(value, dict):
        return {
            key: _REDACTED if _is_secret_key(key) else default_log_redactor(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [default_log_redactor(item) for item in value]
    return value


def redact_mapping(values: Mapping[str, object]) -> dict[str, JSONValue]:
    """JSON-safe copy of an environment source with secret values masked."""
    redacted = default_log_redactor(_jsonable(values))
    return redacted if isinstance(redacted, dict) else {}


def _is_secret_key(key: str) -> bool:
    compact = key.lower().replace("_", "").replace("-", "")
    return any(fragment in compact for fragment in _SECRET_KEY_FRAGMENTS)


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    parsed = logging.getLevelName(str(value).strip().upper())
    if isinstance(parsed, int):
        return parsed
    raise ValueError(f"unsupported logging level {value!r}")


def _jsonable(value: object) -> JSONValue:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return str(value)


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LogRedactor",
    "LoggingConfig",
    "LoggingHandle",
    "configure_logging",
    "default_log_redactor",
    "redact_mapping",
]
