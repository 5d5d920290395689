"""
Telemetry - structured, credential-masking logging.
"""

from gemini_kit.telemetry.logger import (
    GeminiLogger,
    JsonFormatter,
    LogLevel,
    SensitiveDataMasker,
    TextFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "GeminiLogger",
    "JsonFormatter",
    "LogLevel",
    "SensitiveDataMasker",
    "TextFormatter",
    "configure_logging",
    "get_logger",
]
