"""structlog configuration.

dev mode: readable console output
json mode: structured JSON output
"""
import logging
import os

import structlog


def setup_logging() -> None:
    """Configure structlog on top of stdlib logging.

    REPORTS_LOG_FORMAT selects the renderer ("dev" by default, or "json"),
    REPORTS_LOG_LEVEL the root level (INFO by default).
    """
    log_format = os.environ.get("REPORTS_LOG_FORMAT", "dev")
    log_level = os.environ.get("REPORTS_LOG_LEVEL", "INFO")

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # uvicorn access logs are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
