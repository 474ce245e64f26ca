"""
Logging Configuration Module
Structured JSON logging to stdout, with optional rotating log files
"""
import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ACCESS_LOGGER_NAME = "harness_demo.access"

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """JSON formatter emitting one object per line, extra fields included"""

    def format(self, record):
        log_entry = {
            "time": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # Add exception information if present
        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored formatter for better console readability"""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        formatted_msg = super().format(record)

        # Color only the level name
        return formatted_msg.replace(
            record.levelname,
            f"{color}{record.levelname}{reset}",
            1
        )


def setup_logging(
    log_level: str = "INFO",
    enable_json: bool = True,
    enable_colors: bool = True,
    log_dir: Optional[str] = None
):
    """
    Configure structured logging for the service

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_json: Emit JSON lines on stdout instead of the plain text format
        enable_colors: Colorize the plain text format when stdout is a TTY
        log_dir: When set, also write rotating app.log / error.log files there
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove default handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    text_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    console_handler = logging.StreamHandler(sys.stdout)
    if enable_json:
        console_handler.setFormatter(JSONFormatter())
    elif enable_colors and sys.stdout.isatty():
        console_handler.setFormatter(ColoredConsoleFormatter(text_format, datefmt='%Y-%m-%d %H:%M:%S'))
    else:
        console_handler.setFormatter(logging.Formatter(text_format, datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_formatter = JSONFormatter()

        app_handler = RotatingFileHandler(
            log_path / "app.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        app_handler.setLevel(logging.INFO)
        app_handler.setFormatter(file_formatter)
        root_logger.addHandler(app_handler)

        error_handler = RotatingFileHandler(
            log_path / "error.log",
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        root_logger.addHandler(error_handler)

    # Our access logger replaces uvicorn's
    logging.getLogger("uvicorn.access").handlers.clear()
    logging.getLogger("uvicorn.access").propagate = False
    logging.getLogger("uvicorn.error").handlers.clear()
    logging.getLogger("uvicorn.error").propagate = True

    root_logger.debug(
        f"Logging initialized - Level: {log_level}, JSON: {enable_json}, Directory: {log_dir}"
    )

    return root_logger
