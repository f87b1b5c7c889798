"""
Structured logging setup for UhaiLink.

Configures structlog for JSON-formatted structured logging across all
services. Every log line includes timestamp, level, logger name, and
event. Per-request context (request_id, incident_id) is bound through
``structlog.contextvars`` at processing time.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", *, json_logs: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; the latest call wins.

    Args:
        level: Logging level name (``"DEBUG"``, ``"INFO"``, ...).
        json_logs: Render JSON lines when ``True``, coloured console
                   output otherwise.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )
    # httpx logs every request URL at INFO, which includes the Twilio account SID.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def mask_phone(phone: str | None) -> str:
    """Return *phone* with everything but the last four digits masked.

    Used wherever a recipient number reaches the log stream.
    """
    if not phone:
        return ""
    visible = phone[-4:]
    return "*" * max(len(phone) - 4, 0) + visible
