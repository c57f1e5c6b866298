"""Structured logging setup for the trade paginator."""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from ..config.settings import LoggingConfig


CONTEXT_PREFIX = "ctx_"


def _context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached through ``log_with_context``, without their prefix."""
    return {
        key[len(CONTEXT_PREFIX):]: value
        for key, value in record.__dict__.items()
        if key.startswith(CONTEXT_PREFIX)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line; context fields are nested under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'service': getattr(record, 'service', None),
        }

        context = _context_fields(record)
        if context:
            log_data['context'] = context

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    ``timestamp [LEVEL] logger: message key=value ...`` lines.

    Levels are coloured only when the handler's stream is a terminal.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, stream: Optional[TextIO] = None, use_colors: bool = True):
        super().__init__()
        isatty = getattr(stream, 'isatty', None)
        self.use_colors = use_colors and isatty is not None and isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level}{self.RESET}"

        formatted = f"{timestamp} [{level}] {record.name}: {record.getMessage()}"

        context = _context_fields(record)
        if context:
            formatted += " " + " ".join(f"{key}={value}" for key, value in context.items())

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def _build_handler(config: LoggingConfig) -> logging.Handler:
    output = config.output.lower()
    if output == 'stdout':
        handler = logging.StreamHandler(sys.stdout)
    elif output == 'stderr':
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(config.output)

    if config.format.lower() == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        # FileHandler exposes its stream too; files are never ttys
        handler.setFormatter(TextFormatter(stream=handler.stream))
    return handler


def setup_logging(config: LoggingConfig, service_name: str = "trade-paginator") -> None:
    """
    Route all logging through a single handler built from ``config``.

    Args:
        config: Logging configuration
        service_name: Name attached to every record as ``service``
    """
    handler = _build_handler(config)

    class ServiceContextFilter(logging.Filter):
        def filter(self, record):
            record.service = service_name
            return True

    handler.addFilter(ServiceContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured: level={config.level}, format={config.format}, "
        f"output={config.output}, service={service_name}"
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **context):
    """Log ``message`` with ``context`` attached as structured fields."""
    extra = {f"{CONTEXT_PREFIX}{key}": value for key, value in context.items()}
    logger.log(level, message, extra=extra)
