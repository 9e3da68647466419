"""
Centralized logging configuration for dnsguard
"""

import logging
import logging.handlers
import sys
import json
from pathlib import Path
from typing import Optional, Union
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler


SYSLOG_TARGET = "syslog"  # reserved log_file value that sends output to the system log


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for better readability"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class LoggerManager:
    """Manages application logging configuration"""

    TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    def __init__(self):
        self._configured = False

    @property
    def configured(self) -> bool:
        return self._configured

    def setup_logging(
        self,
        log_file: str = "",
        verbose: bool = False,
        format_type: str = "text",
        work_dir: Optional[Union[str, Path]] = None,
        max_bytes: int = 10485760,  # 10MB
        backup_count: int = 5,
        force: bool = False,
    ):
        """Configure application logging.

        An empty log_file writes to stdout, "syslog" writes to the system
        log, anything else is a file path (relative paths are joined to
        work_dir).
        """
        if self._configured and not force:
            return

        level = logging.DEBUG if verbose else logging.INFO

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        if not log_file:
            handler = logging.StreamHandler(sys.stdout)
            if format_type == "json":
                formatter = JSONFormatter()
            elif sys.stdout.isatty():
                formatter = ColoredFormatter(self.TEXT_FORMAT)
            else:
                formatter = logging.Formatter(self.TEXT_FORMAT)
        elif log_file == SYSLOG_TARGET:
            handler = self._syslog_handler()
            formatter = logging.Formatter('dnsguard[%(process)d]: %(name)s - %(levelname)s - %(message)s')
        else:
            path = Path(log_file)
            if not path.is_absolute() and work_dir is not None:
                path = Path(work_dir) / path
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                path,
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            if format_type == "json":
                formatter = JSONFormatter()
            else:
                formatter = logging.Formatter(self.TEXT_FORMAT)

        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

        # Set levels for third-party libraries
        logging.getLogger("uvicorn").setLevel(logging.WARNING)
        logging.getLogger("fastapi").setLevel(logging.WARNING)

        self._configured = True

    @staticmethod
    def _syslog_handler() -> logging.Handler:
        for address in ("/dev/log", "/var/run/syslog"):
            if Path(address).exists():
                return logging.handlers.SysLogHandler(address=address)
        return logging.handlers.SysLogHandler()

    def get_logger(self, name: str) -> 'LoggerAdapter':
        """Get a logger instance"""
        logger = logging.getLogger(name)
        return LoggerAdapter(logger)


class LoggerAdapter(logging.LoggerAdapter):
    """Custom logger adapter for adding context"""

    def __init__(self, logger: logging.Logger):
        super().__init__(logger, {})
        self.context = {}

    def process(self, msg, kwargs):
        """Process log message and add extra context"""
        extra = dict(kwargs.get('extra') or {})
        extra.update(self.context)

        kwargs['extra'] = {'extra_data': extra} if extra else {}
        return msg, kwargs

    def with_context(self, **context) -> 'LoggerAdapter':
        """Create a new logger with additional context"""
        new_logger = LoggerAdapter(self.logger)
        new_logger.context = context
        return new_logger


# Global logger manager
logger_manager = LoggerManager()


def get_logger(name: str) -> LoggerAdapter:
    """Get a logger instance for a module"""
    return logger_manager.get_logger(name)


def setup_logging(log_settings=None, format_type: str = "text", work_dir=None, force: bool = False):
    """Configure logging from early log settings (a LogSettings model or None)"""
    log_file = getattr(log_settings, "log_file", "") or ""
    verbose = bool(getattr(log_settings, "verbose", False))
    logger_manager.setup_logging(
        log_file=log_file,
        verbose=verbose,
        format_type=format_type,
        work_dir=work_dir,
        force=force,
    )
