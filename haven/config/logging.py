"""
Logging configuration for the Haven hostel operations core.
Provides console logging (coloured in development) and optional
rotating plain/JSON file handlers.
"""

import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from haven.config.settings import Settings, get_settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def __init__(self, *args, environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to the log record"""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = self.environment

        for attr in ('user_id', 'role', 'operation', 'entity_ref'):
            if hasattr(record, attr):
                log_record[attr] = getattr(record, attr)

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Create the dictConfig mapping for the given settings."""
    handlers: Dict[str, Dict[str, Any]] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if settings.is_development() else 'standard',
        },
    }

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers['file'] = {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': os.path.join(settings.LOG_DIR, 'haven.log'),
            'maxBytes': 10485760,  # 10MB
            'backupCount': 10,
            'formatter': 'standard',
            'encoding': 'utf8',
        }
        if settings.LOG_JSON:
            handlers['json_file'] = {
                'level': 'INFO',
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': os.path.join(settings.LOG_DIR, 'haven.json.log'),
                'maxBytes': 10485760,
                'backupCount': 10,
                'formatter': 'json',
                'encoding': 'utf8',
            }

    handler_names = list(handlers)

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s',
                'environment': settings.ENVIRONMENT,
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': {
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                },
            },
        },
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': handler_names,
                'level': settings.LOG_LEVEL,
            },
            'haven': {
                'handlers': handler_names,
                'level': settings.LOG_LEVEL,
                'propagate': False,
            },
            'sqlalchemy.engine': {
                'handlers': ['console'],
                'level': 'INFO' if settings.DB_ECHO else 'WARNING',
                'propagate': False,
            },
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure application logging"""
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))
    logger = logging.getLogger("haven")
    logger.info(f"Logging initialized with level: {settings.LOG_LEVEL}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger with context"""
    return logging.getLogger(name)
