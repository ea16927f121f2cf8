# src/wasi_listings/utils/logging_config.py

import os
import sys
import json
import logging
import logging.handlers
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, Union

DEFAULT_LOG_DIR = "logs"
DEFAULT_RETENTION_DAYS = 7
MAX_LOG_SIZE_MB = 10
MAX_RUN_LOGS = 10

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Attributes every LogRecord carries; anything else was passed via ``extra``
_RECORD_ATTRIBUTES = {
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "id", "levelname", "levelno", "lineno", "module", "msecs",
    "message", "msg", "name", "pathname", "process", "processName",
    "relativeCreated", "stack_info", "taskName", "thread", "threadName",
}


class LogRotationPolicy:
    """Cleanup of old scraper log files."""

    @staticmethod
    def clean_old_logs(log_dir: str, retention_days: int = DEFAULT_RETENTION_DAYS):
        """Remove log files older than retention_days."""
        log_path = Path(log_dir)
        if not log_path.exists():
            return

        cutoff_time = time.time() - (retention_days * 86400)
        for log_file in log_path.glob("*.log*"):
            try:
                if log_file.stat().st_mtime < cutoff_time:
                    log_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(
                    f"Could not remove old log file {log_file}: {e}")

    @staticmethod
    def limit_run_logs(log_dir: str, app_name: str, max_logs: int = MAX_RUN_LOGS):
        """Keep only the most recent run-specific logs."""
        log_path = Path(log_dir)
        if not log_path.exists():
            return

        run_logs = sorted(log_path.glob(f"{app_name}_run_*.log"),
                          key=lambda x: x.stat().st_mtime, reverse=True)
        for log_file in run_logs[max_logs:]:
            try:
                log_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(
                    f"Could not remove run log {log_file}: {e}")


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ContextFilter(logging.Filter):
    """Add context information to log records."""

    def __init__(self, context=None):
        super().__init__()
        self.context = context or {}

    def filter(self, record):
        for key, value in self.context.items():
            setattr(record, key, value)
        return True


def configure_logging(level: Union[int, str] = logging.INFO,
                      log_dir: Optional[str] = DEFAULT_LOG_DIR,
                      app_name: str = "wasi_listings",
                      context: Dict[str, Any] = None,
                      enable_json_logging: bool = False,
                      include_console: bool = True,
                      retention_days: int = DEFAULT_RETENTION_DAYS):
    """
    Configure application logging.

    Only entry points (the CLI and the API app) call this; importing the
    package never touches logging configuration.

    Args:
        level: Base logging level, as a number or a name such as "DEBUG"
        log_dir: Directory for log files; None disables file logging
        app_name: Application name for log file prefixes
        context: Additional context to include in all logs
        enable_json_logging: Whether to use JSON format for file logs
        include_console: Whether to include console output
        retention_days: Number of days to keep log files

    Returns:
        The configured root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    if root_logger.handlers:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping initialization")
        return root_logger

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = f"{timestamp}_{os.getpid()}"
    context = dict(context or {})
    context.setdefault("run_id", run_id)

    root_logger.setLevel(level)
    ctx_filter = ContextFilter(context)

    plain_formatter = logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT)
    file_formatter = JsonFormatter() if enable_json_logging else plain_formatter

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        LogRotationPolicy.clean_old_logs(log_dir, retention_days)
        LogRotationPolicy.limit_run_logs(log_dir, app_name)

        # Main application log with rotation
        app_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}.log",
            maxBytes=MAX_LOG_SIZE_MB * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        app_handler.setLevel(level)

        # Errors only
        error_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}_errors.log",
            maxBytes=MAX_LOG_SIZE_MB * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)

        # Detailed log for this run only
        run_handler = logging.FileHandler(
            log_path / f"{app_name}_run_{timestamp}.log",
            mode='w',
            encoding='utf-8'
        )
        run_handler.setLevel(logging.DEBUG)

        for handler in (app_handler, error_handler, run_handler):
            handler.setFormatter(file_formatter)
            handler.addFilter(ctx_filter)
            root_logger.addHandler(handler)

    if include_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(plain_formatter)
        console_handler.setLevel(level)
        console_handler.addFilter(ctx_filter)
        root_logger.addHandler(console_handler)

    logging.getLogger('urllib3').setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized for run {context['run_id']}")
    if log_dir:
        root_logger.info(f"Log files: {log_dir}/{app_name}*.log")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger carrying a run_id context filter.

    Unlike configure_logging this never installs handlers.
    """
    logger = logging.getLogger(name)

    has_context_filter = any(isinstance(f, ContextFilter)
                             for f in logger.filters)
    if not has_context_filter:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        logger.addFilter(ContextFilter({"run_id": f"{timestamp}_{os.getpid()}"}))

    return logger


def log_extraction_results(listing_url: str, data: Dict[str, Any],
                           success: bool, error: Optional[str] = None):
    """
    Log one scrape outcome as a single JSON line for later analysis.

    Args:
        listing_url: URL of the listing
        data: Extracted record (may be empty when the scrape failed)
        success: Whether the scrape produced a record
        error: Error message if there was an error
    """
    logger = logging.getLogger("extraction_results")

    result = {
        "timestamp": datetime.now().isoformat(),
        "url": listing_url,
        "success": success,
        "data": {
            k: v for k, v in data.items()
            if k in ["title", "location", "price", "property_type",
                     "bedrooms", "bathrooms", "parking"]
        },
        "image_count": len(data.get("images") or []),
    }

    if not success and error:
        result["error"] = error

    log_level = logging.INFO if success else logging.ERROR
    logger.log(log_level, json.dumps(result, ensure_ascii=False),
               extra={"extraction_result": True})
