import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from resource_acctest.config.schemas import LoggingConfig


class DetailedFormatter(logging.Formatter):
    """Formatter that adds ``module.function:line`` caller information."""

    def format(self, record):
        record.caller_info = f"{record.module}.{record.funcName}:{record.lineno}"
        return super().format(record)


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s [%(caller_info)s] - %(message)s"
NOISY_LOGGERS = ("botocore", "boto3", "urllib3")


def setup_logging(config: Optional['LoggingConfig'] = None) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the toolkit using structlog.

    Args:
        config: Logging configuration. If None, the configuration manager's
               settings are used.
    Returns:
        Configured structlog logger instance.
    """
    if config is None:
        from resource_acctest.config.manager import get_config_manager
        config = get_config_manager().app_config.logging

    destination = config.destination.value
    level = config.level.value

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))

    handlers = []

    if destination in ("file", "both"):
        log_dir = os.path.dirname(config.file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count
        )
        file_handler.setFormatter(DetailedFormatter(LOG_FORMAT))
        handlers.append(file_handler)

    if destination in ("stdout", "both"):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(DetailedFormatter(LOG_FORMAT))
        handlers.append(console_handler)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    # SDK wire logging only at DEBUG
    sdk_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)

    configure_structlog()

    logger = structlog.get_logger("resource_acctest")
    logger.debug(
        "Logging configured",
        log_level=level,
        log_destination=destination,
        log_file=config.file_path if destination != "stdout" else None
    )

    return logger


def get_logger(name: str):
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def configure_structlog() -> None:
    """Route structlog through stdlib ``logging`` so root level and handlers apply."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Loggers used before setup_logging() still go through stdlib filtering.
configure_structlog()
