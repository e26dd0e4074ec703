"""
Structured logging configuration using structlog.

JSON lines in production, colored console output elsewhere. Secrets are
masked by a processor before any renderer sees the event.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

import structlog

from .config import settings

REDACTED = "***"
SENSITIVE_KEYS = frozenset(
    {"private_key", "privatekey", "authorization", "api_key", "apikey", "oneinch_api_key"}
)
NOISY_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "web3", "urllib3")


def redact_sensitive(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Mask values bound under key-material names."""
    for key in list(event_dict):
        if key.replace("-", "_").lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(log_level: Optional[str] = None, *, json_logs: Optional[bool] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override log level (default: from settings.log_level)
        json_logs: Force JSON (True) or console (False) rendering; defaults
            to JSON in production.
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = settings.is_production

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        redact_sensitive,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdlib records (app.* modules, uvicorn) get the same pipeline
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
