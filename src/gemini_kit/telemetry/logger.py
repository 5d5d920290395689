"""
Structured logging for gemini-kit.

Thin wrapper over the standard ``logging`` module that accepts keyword
fields and masks credentials before anything reaches a handler.

Loggers propagate to the root logger and install no handlers of their own
until :func:`configure_logging` is called, so applications keep full
control over where library output goes.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
from enum import Enum
from typing import Any, ClassVar, TextIO

REDACTED = "***REDACTED***"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def to_logging_level(self) -> int:
        return getattr(logging, self.value)


class SensitiveDataMasker:
    """Masks Gemini credentials in log messages and fields."""

    DEFAULT_PATTERNS: ClassVar[list[tuple[str, str]]] = [
        # Google API keys
        (r"AIza[0-9A-Za-z_\-]{20,}", REDACTED),
        # Header and query forms of the key
        (r"(x-goog-api-key[\"']?\s*[:=]\s*[\"']?)([^\"'\s,}]+)", r"\1" + REDACTED),
        (r"([?&]key=)([^&\s]+)", r"\1" + REDACTED),
        # Bearer tokens (OpenAI-compatible endpoint)
        (r"(Bearer\s+)([^\s\"',}]+)", r"\1" + REDACTED),
        # Environment variable patterns
        (r"(GEMINI_API_KEY=)([^\s]+)", r"\1" + REDACTED),
        (r"(GOOGLE_API_KEY=)([^\s]+)", r"\1" + REDACTED),
    ]

    SENSITIVE_FIELDS: ClassVar[tuple[str, ...]] = (
        "api_key",
        "x-goog-api-key",
        "authorization",
        "token",
        "secret",
    )

    def __init__(self, patterns: list[tuple[str, str]] | None = None) -> None:
        self._patterns = [
            (re.compile(p, re.IGNORECASE), r)
            for p, r in (patterns or self.DEFAULT_PATTERNS)
        ]

    def mask(self, text: str) -> str:
        """Mask credentials in free text."""
        for pattern, replacement in self._patterns:
            text = pattern.sub(replacement, text)
        return text

    def mask_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.mask(value)
        if isinstance(value, dict):
            return self.mask_dict(value)
        if isinstance(value, (list, tuple)):
            return [self.mask_value(v) for v in value]
        return value

    def mask_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask a mapping of log fields.

        Values whose key names a credential are replaced outright; every
        other value is masked recursively.
        """
        result: dict[str, Any] = {}
        for key, value in data.items():
            if any(sensitive in str(key).lower() for sensitive in self.SENSITIVE_FIELDS):
                result[key] = REDACTED
            else:
                result[key] = self.mask_value(value)
        return result


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, masker: SensitiveDataMasker | None = None) -> None:
        super().__init__()
        self._masker = masker or SensitiveDataMasker()

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": self._masker.mask(record.getMessage()),
        }

        fields = getattr(record, "fields", None)
        if fields:
            log_data.update(self._masker.mask_dict(fields))

        if record.exc_info:
            log_data["exception"] = self._masker.mask(self.formatException(record.exc_info))

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter; keyword fields are appended as key=value."""

    def __init__(self, masker: SensitiveDataMasker | None = None) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self._masker = masker or SensitiveDataMasker()

    def format(self, record: logging.LogRecord) -> str:
        result = self._masker.mask(super().format(record))

        fields = getattr(record, "fields", None)
        if fields:
            masked = self._masker.mask_dict(fields)
            result += " | " + " ".join(f"{k}={v}" for k, v in masked.items())

        return result


class GeminiLogger:
    """Logger with keyword-field support.

    Example:
        >>> logger = GeminiLogger.get_logger("gemini_kit.executor")
        >>> logger.debug("Sending request", method="POST", attempt=1)
    """

    _loggers: ClassVar[dict[str, logging.Logger]] = {}
    _handler: ClassVar[logging.Handler | None] = None
    _level: ClassVar[int | None] = None

    @classmethod
    def configure(
        cls,
        level: LogLevel | str = LogLevel.INFO,
        format: str = "text",
        stream: TextIO | None = None,
        masker: SensitiveDataMasker | None = None,
    ) -> None:
        """Attach a masking handler to every gemini-kit logger.

        Args:
            level: Minimum level
            format: 'json' or 'text'
            stream: Output stream (default: stderr)
            masker: Custom credential masker
        """
        level = LogLevel(level.upper()) if isinstance(level, str) else level
        formatter: logging.Formatter = (
            JsonFormatter(masker=masker) if format == "json" else TextFormatter(masker=masker)
        )

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(formatter)

        cls._handler = handler
        cls._level = level.to_logging_level()
        for logger in cls._loggers.values():
            cls._attach(logger)

    @classmethod
    def _attach(cls, logger: logging.Logger) -> None:
        if cls._handler is None:
            return
        logger.handlers = [cls._handler]
        logger.setLevel(cls._level or logging.INFO)
        logger.propagate = False

    @classmethod
    def get_logger(cls, name: str) -> GeminiLogger:
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._attach(logger)
            cls._loggers[name] = logger
        return cls(cls._loggers[name])

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, exc_info: bool = False, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {"fields": fields} if fields else None
        self._logger.log(level, msg, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, **fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, **fields)

    def error(self, msg: str, exc_info: bool = False, **fields: Any) -> None:
        self._log(logging.ERROR, msg, exc_info=exc_info, **fields)


def get_logger(name: str) -> GeminiLogger:
    """Get a gemini-kit logger.

    Args:
        name: Dotted logger name, normally under ``gemini_kit``

    Returns:
        Logger instance
    """
    return GeminiLogger.get_logger(name)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    format: str = "text",
    stream: TextIO | None = None,
) -> None:
    """Send gemini-kit log output to ``stream`` with credentials masked."""
    GeminiLogger.configure(level=level, format=format, stream=stream)
