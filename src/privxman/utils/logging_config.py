"""Logging configuration for privxman."""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "privxman"


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output formats."""

    RICH = "rich"
    JSON = "json"


@dataclass
class LoggingConfig:
    """Configuration for the privxman loggers."""

    level: LogLevel = LogLevel.WARNING
    format_type: LogFormat = LogFormat.RICH
    log_http_requests: bool = False
    show_path: bool = False
    sensitive_data_patterns: List[str] = field(
        default_factory=lambda: [
            r"(Bearer\s+)[A-Za-z0-9._~+/=-]+",
            r"((?:api_token|password|secret|token)[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+",
        ]
    )

    @classmethod
    def from_flags(
        cls, verbose: bool = False, debug: bool = False, log_format: LogFormat = LogFormat.RICH
    ) -> "LoggingConfig":
        """Map the global --verbose/--debug/--log-format options to a configuration."""
        log_format = LogFormat(log_format)
        if debug:
            return cls(
                level=LogLevel.DEBUG,
                format_type=log_format,
                log_http_requests=True,
                show_path=True,
            )
        if verbose:
            return cls(level=LogLevel.INFO, format_type=log_format)
        return cls(format_type=log_format)


class SensitiveDataFilter(logging.Filter):
    """Filter to redact credentials from log messages."""

    def __init__(self, patterns: List[str]) -> None:
        """
        Initialize the filter with sensitive data patterns.

        Each pattern's first group is kept and the rest of the match is
        replaced with [REDACTED].

        Args:
            patterns: List of regex patterns to match sensitive data
        """
        super().__init__()
        self.compiled_patterns = [re.compile(pattern, re.IGNORECASE) for pattern in patterns]

    def filter(self, record: logging.LogRecord) -> bool:
        # Render first so values passed through args are covered as well
        message = record.getMessage()
        record.msg = self._redact_sensitive_data(message)
        record.args = None
        return True

    def _redact_sensitive_data(self, text: str) -> str:
        for pattern in self.compiled_patterns:
            text = pattern.sub(lambda m: f"{m.group(1)}[REDACTED]", text)
        return text


class StructuredFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _create_handler(config: LoggingConfig, console: Optional[Console]) -> logging.Handler:
    handler: logging.Handler
    if config.format_type == LogFormat.JSON:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=config.show_path,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    if config.sensitive_data_patterns:
        handler.addFilter(SensitiveDataFilter(config.sensitive_data_patterns))

    return handler


def setup_logging(
    config: Optional[LoggingConfig] = None, console: Optional[Console] = None
) -> logging.Logger:
    """
    Configure the privxman logger hierarchy.

    Safe to call more than once; existing handlers are replaced.

    Args:
        config: Logging configuration (defaults to warnings only)
        console: Rich console to log to (defaults to a stderr console)

    Returns:
        The configured root privxman logger
    """
    config = config or LoggingConfig()

    handler = _create_handler(config, console)

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, config.level.value))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False

    # httpx logs each request at INFO and connection details at DEBUG
    http_logger = logging.getLogger("httpx")
    http_logger.handlers.clear()
    http_logger.propagate = not config.log_http_requests
    if config.log_http_requests:
        http_logger.setLevel(logging.DEBUG)
        http_logger.addHandler(handler)
    else:
        http_logger.setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger
