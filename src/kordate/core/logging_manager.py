"""Centralized Logging Management for kordate

Handles logger lookup, handler configuration and the verbose trace switch for
the ``kordate`` package logger.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

PACKAGE_LOGGER = "kordate"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

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
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


class LoggingManager:
    """Logging configuration for the kordate package logger.

    Importing the library never touches the root logger. Handlers are only
    attached when ``configure_logging`` is called (directly or through
    ``kordate.configure``) or when verbose tracing is switched on.
    """

    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return

        self.loggers: Dict[str, logging.Logger] = {}
        self.verbose = False
        self.level = "WARNING"
        self._console_handler: Optional[logging.Handler] = None
        self._file_handler: Optional[logging.Handler] = None

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(logging.NullHandler())
        self._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Class method to get logger instance.

        Args:
            name: Logger name (typically __name__ of the module)

        Returns:
            Logger instance
        """
        manager = cls()
        return manager._get_logger_instance(name)

    def _get_logger_instance(self, name: str) -> logging.Logger:
        """Internal method to get logger instance."""
        if name in self.loggers:
            return self.loggers[name]

        logger = logging.getLogger(name)
        self.loggers[name] = logger
        return logger

    def configure_logging(
        self,
        level: str = "WARNING",
        log_to_console: bool = True,
        file_path: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5
    ):
        """Attach console and file handlers to the package logger.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_console: Whether to log to stderr
            file_path: Optional log file, rotated at ``max_bytes``
            max_bytes: Rotation threshold for the file handler
            backup_count: Number of rotated files to keep
        """
        numeric_level = self._to_numeric_level(level)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        self.level = level.upper()

        self._remove_handlers()

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            package_logger.addHandler(console_handler)
            self._console_handler = console_handler

        if file_path:
            log_file = Path(file_path)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            package_logger.addHandler(file_handler)
            self._file_handler = file_handler

        self.set_log_level(level)
        if self.verbose:
            package_logger.setLevel(logging.DEBUG)
        else:
            package_logger.setLevel(numeric_level)

    def set_log_level(self, level: str):
        """Set the logging level for the package handlers.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = self._to_numeric_level(level)
        for handler in (self._console_handler, self._file_handler):
            if handler is not None:
                handler.setLevel(logging.DEBUG if self.verbose else numeric_level)

    def set_verbose(self, enabled: bool):
        """Switch per-match trace output on or off.

        Tracing lowers the package logger to DEBUG. Without any configured
        handler a console handler is attached so trace lines are visible.
        """
        self.verbose = enabled
        package_logger = logging.getLogger(PACKAGE_LOGGER)

        if enabled:
            if self._console_handler is None and self._file_handler is None:
                self.configure_logging(level=self.level)
            package_logger.setLevel(logging.DEBUG)
            for handler in (self._console_handler, self._file_handler):
                if handler is not None:
                    handler.setLevel(logging.DEBUG)
        else:
            package_logger.setLevel(self._to_numeric_level(self.level))
            self.set_log_level(self.level)

    def _remove_handlers(self):
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in (self._console_handler, self._file_handler):
            if handler is not None:
                package_logger.removeHandler(handler)
                handler.close()
        self._console_handler = None
        self._file_handler = None

    @staticmethod
    def _to_numeric_level(level: str) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')
        return numeric_level
