"""
Logging configuration for the MediaDeck application.
Provides structured logging with file output, rotation, and multiple loggers.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from datetime import datetime
import json

CONTEXT_FIELDS = ('user_id', 'request_id', 'ip_address', 'path')


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record):
        log_obj = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)
        if hasattr(record, 'duration'):
            log_obj['duration_ms'] = record.duration

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        level_color = self.COLORS.get(record.levelname, '')
        level = f"{level_color}{record.levelname}{self.RESET}"
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')

        message = f"[{timestamp}] {level:<15} {record.name:<20} {record.getMessage()}"

        context_parts = []
        if hasattr(record, 'user_id'):
            context_parts.append(f"user={record.user_id}")
        if hasattr(record, 'request_id'):
            context_parts.append(f"req={record.request_id[:8]}")
        if context_parts:
            message += f" [{' '.join(context_parts)}]"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def _rotating_handler(path, level, max_bytes, backup_count, formatter):
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(app_name="mediadeck", log_level="INFO", log_dir="logs"):
    """
    Setup logging configuration.

    Args:
        app_name: Name of the application for log files
        log_level: Minimum console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory to store log files; relative paths are resolved
            against the application directory

    Returns:
        dict: the configured loggers and the log directory
    """
    log_path = Path(log_dir)
    if not log_path.is_absolute():
        log_path = Path(__file__).parent.parent / log_dir
    log_path.mkdir(parents=True, exist_ok=True)

    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    # Remove existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    json_formatter = JSONFormatter()

    app_log_file = log_path / f"{app_name}.log"
    root_logger.addHandler(_rotating_handler(
        app_log_file, logging.DEBUG, 10 * 1024 * 1024, 5, json_formatter))

    error_log_file = log_path / f"{app_name}_errors.log"
    root_logger.addHandler(_rotating_handler(
        error_log_file, logging.WARNING, 5 * 1024 * 1024, 3, json_formatter))

    # HTTP requests
    access_log_file = log_path / f"{app_name}_access.log"
    access_logger = logging.getLogger('access')
    access_logger.setLevel(logging.INFO)
    access_logger.addHandler(_rotating_handler(
        access_log_file, logging.INFO, 20 * 1024 * 1024, 7, json_formatter))
    access_logger.propagate = False

    # JSON document reads and writes
    storage_log_file = log_path / f"{app_name}_storage.log"
    storage_logger = logging.getLogger('storage')
    storage_logger.setLevel(logging.INFO)
    storage_logger.addHandler(_rotating_handler(
        storage_log_file, logging.DEBUG, 10 * 1024 * 1024, 3, json_formatter))
    storage_logger.propagate = False

    root_logger.info(f"Logging configured - files in {log_path}")

    return {
        'main': root_logger,
        'access': access_logger,
        'storage': storage_logger,
        'log_dir': log_path
    }


def get_logger(name=None):
    """Get a logger instance."""
    return logging.getLogger(name)


def get_access_logger():
    """Get the access logger for HTTP requests."""
    return logging.getLogger('access')


def get_storage_logger():
    """Get the storage logger for document operations."""
    return logging.getLogger('storage')


class LogContext:
    """Context manager for adding extra fields to log records."""

    def __init__(self, logger, **kwargs):
        self.logger = logger
        self.old_factory = logging.getLogRecordFactory()
        self.extra = kwargs

    def __enter__(self):
        def record_factory(*args, **factory_kwargs):
            record = self.old_factory(*args, **factory_kwargs)
            for key, value in self.extra.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(record_factory)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        logging.setLogRecordFactory(self.old_factory)


def log_with_context(logger, **context):
    """Create a context manager that adds extra fields to log records."""
    return LogContext(logger, **context)


def log_request(method, path, status_code, duration_ms, user_id=None, ip_address=None):
    """Log HTTP request with standardized format."""
    access_logger = get_access_logger()
    with log_with_context(access_logger, user_id=user_id, ip_address=ip_address, duration=duration_ms):
        access_logger.info(f"{method} {path} -> {status_code}")


def log_user_action(action, user_id, details=None):
    """Log user action with context."""
    logger = get_logger('user_actions')
    with log_with_context(logger, user_id=user_id):
        message = f"User action: {action}"
        if details:
            message += f" - {details}"
        logger.info(message)


def log_storage_operation(operation, document, path=None, records=None):
    """Log a JSON document read or write."""
    storage_logger = get_storage_logger()
    with log_with_context(storage_logger, path=path):
        message = f"Document {operation}: {document}"
        if records is not None:
            message += f" ({records} records)"
        storage_logger.debug(message)
