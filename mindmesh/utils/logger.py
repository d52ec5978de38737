"""Logging configuration using Loguru.

Records carry the caller scope (``tenant_id`` / ``user_id``) in ``extra``.
Unscoped records, such as startup messages, show ``-`` for both.
"""

import sys
from pathlib import Path

from loguru import logger

# Defaults for records logged outside any caller scope
SCOPE_DEFAULTS = {"tenant_id": "-", "user_id": "-"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[tenant_id]}/{extra[user_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[tenant_id]}/{extra[user_id]} | "
    "{name}:{function}:{line} - {message}"
)


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """Configure a console sink and an optional rotating JSON file sink, both showing the caller scope."""
    logger.remove()
    logger.configure(extra=dict(SCOPE_DEFAULTS))

    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "mindmesh_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str, **scope):
    """
    Get a logger instance for a module.

    Keyword arguments (typically ``tenant_id`` and ``user_id``) are bound to
    every record logged through the returned logger.
    """
    return logger.bind(module=name, **scope)


def scoped(bound_logger, tenant_id: str | None, user_id: str | None):
    """Bind the caller scope onto an existing module logger."""
    return bound_logger.bind(tenant_id=tenant_id or "-", user_id=user_id or "-")
