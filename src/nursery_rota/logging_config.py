"""
Logging configuration for the rota validation engine
"""
import logging
import logging.config
import sys
from typing import Optional

import structlog
from pythonjsonlogger.json import JsonFormatter

from .config import Settings, settings as default_settings


def build_logging_config(settings: Settings) -> dict:
    """Build the dictConfig used by setup_logging"""
    level = "DEBUG" if settings.debug else settings.log_level
    handlers = ["console"]

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "detailed": {
                "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(funcName)s(): %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "json": {
                "()": JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d %(funcName)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "standard",
                "stream": sys.stdout
            }
        },
        "loggers": {
            "": {
                "level": "INFO",
                "handlers": handlers,
                "propagate": False
            },
            "nursery_rota": {
                "level": level,
                "handlers": handlers,
                "propagate": False
            },
            "asyncpg": {
                "level": "WARNING",
                "handlers": handlers,
                "propagate": False
            }
        }
    }

    if settings.log_to_file:
        log_dir = settings.log_dir
        logging_config["handlers"].update({
            "file_info": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "INFO",
                "formatter": "detailed",
                "filename": str(log_dir / "rota.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf8"
            },
            "file_error": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "ERROR",
                "formatter": "detailed",
                "filename": str(log_dir / "rota_errors.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf8"
            },
            "json_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "INFO",
                "formatter": "json",
                "filename": str(log_dir / "rota_structured.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf8"
            }
        })
        logging_config["loggers"][""]["handlers"] = ["console", "file_info", "file_error"]
        logging_config["loggers"]["nursery_rota"]["handlers"] = ["console", "file_info", "file_error", "json_file"]
        logging_config["loggers"]["asyncpg"]["handlers"] = ["file_info"]

    return logging_config


def setup_logging(settings: Optional[Settings] = None):
    """Setup structured logging configuration"""
    settings = settings or default_settings

    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(settings))

    # Configure structlog for structured logging
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
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = logging.getLogger("nursery_rota")
    logger.info(f"Logging configured - Debug: {settings.debug}")


class ValidationLogger:
    """Structured logging for validation passes"""

    def __init__(self, logger_name: str = "nursery_rota.validation"):
        self.structured_logger = structlog.get_logger(logger_name)

    def log_validation_start(self, scope: str, shift_count: int, member_count: int):
        self.structured_logger.info(
            "validation_started",
            scope=scope,
            shift_count=shift_count,
            member_count=member_count,
        )

    def log_validation_result(self, scope: str, summary: dict, fingerprint: str, duration_ms: float):
        self.structured_logger.info(
            "validation_completed",
            scope=scope,
            fingerprint=fingerprint,
            duration_ms=round(duration_ms, 2),
            **summary,
        )

    def log_rejection(self, shift_id: str, reason: str, message: str):
        self.structured_logger.warning(
            "shift_rejected",
            shift_id=shift_id,
            reason=reason,
            message=message,
        )

    def log_validation_failure(self, scope: str, error: Exception):
        self.structured_logger.error(
            "validation_aborted",
            scope=scope,
            error=error.__class__.__name__,
            message=str(error),
        )
