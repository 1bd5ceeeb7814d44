"""
Centralized logging configuration.

WHY: Modules only ever call logging.getLogger(__name__). This is the one
place that decides level, format and handlers.
"""

import logging
from typing import Optional

from infraworks.core.config import settings
from infraworks.middleware.request_context import RequestIdFilter


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Install a console handler on the root logger.

    WHY: Idempotent so create_app() can be called repeatedly (tests) without
    stacking handlers.

    Args:
        level: Log level name (defaults to settings.LOG_LEVEL)

    Returns:
        The configured root logger
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = next(
        (h for h in root_logger.handlers if getattr(h, "_infraworks", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._infraworks = True  # type: ignore[attr-defined]
        handler.addFilter(RequestIdFilter())
        root_logger.addHandler(handler)

    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))

    # Driver chatter stays at WARNING unless SQL echo is on
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )

    return root_logger
