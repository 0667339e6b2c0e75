"""
Logging Configuration
====================

structlog in front of stdlib logging; console output is JSON in production.
"""

import logging
import logging.config
import sys
from typing import Dict, Any, TYPE_CHECKING
import structlog
from structlog.types import Processor

from .settings import get_settings

if TYPE_CHECKING:
    from .settings import Settings


def _final_processor(settings: "Settings") -> Processor:
    if settings.environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.environment == "development")


def setup_logging() -> None:
    """Configure structlog and the standard library handlers from settings."""
    settings = get_settings()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _final_processor(settings),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(get_logging_config(settings))


def get_logging_config(settings: "Settings") -> Dict[str, Any]:
    """Build the ``dictConfig`` mapping; formatters are only declared when a handler uses them."""
    production = settings.environment == "production"
    formatters: Dict[str, Any] = {
        "console": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    }
    if production:
        formatters["console"] = {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        }

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.log_level,
            "formatter": "console",
            "stream": sys.stderr,
        },
    }
    root_handlers = ["console"]

    if settings.log_to_file:
        formatters["file"] = {
            "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
        log_dir = settings.storage_path / "logs"
        for name, level, filename in (
            ("file", settings.log_level, "pixeltree.log"),
            ("error_file", "ERROR", "error.log"),
        ):
            handlers[name] = {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "file",
                "filename": str(log_dir / filename),
                "maxBytes": 10 * 1024 * 1024,
                "backupCount": 5,
            }
            root_handlers.append(name)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            "": {"level": settings.log_level, "handlers": root_handlers, "propagate": False},
            # Pillow's plugin loader is chatty at DEBUG.
            "PIL": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# Ensure log directories exist
def ensure_log_directories() -> None:
    """Ensure log directories exist."""
    settings = get_settings()
    if not settings.log_to_file:
        return
    log_dir = settings.storage_path / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)


# Initialize logging on import
ensure_log_directories()
setup_logging()
