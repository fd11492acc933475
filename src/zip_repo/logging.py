from __future__ import annotations

import logging
import sys

import structlog

_LOGGING_CONFIGURED = False


def setup_logging() -> structlog.BoundLogger:
    """Set up structured logging for the zip_repo package.

    Logs are rendered as JSON lines on stderr, so they never mix with the
    final status line printed on stdout. Configuration happens once; later
    calls only return the logger.

    Returns:
        A structlog logger instance configured for the zip_repo package.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if not _LOGGING_CONFIGURED:
        logging.basicConfig(
            level=logging.INFO,
            handlers=[logging.StreamHandler(sys.stderr)],
            format="%(message)s",
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(ensure_ascii=False),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("zip_repo")


logger = setup_logging()
