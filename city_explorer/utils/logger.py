"""
Logger utility for the city explorer API
Provides structured logging with file and console output
"""

import logging
import sys
from pathlib import Path

ROOT_LOGGER_NAME = "city_explorer"

DEFAULT_CONFIG = {
    'level': 'INFO',
    'file': None,
    'console': True
}


def setup_logging(config=None):
    """
    Attach handlers to the package root logger

    Every module logger is a child of ``city_explorer`` and propagates to it,
    so this only needs to run once, at application startup.

    Args:
        config: Logging settings (level, file, console)

    Returns:
        The configured root logger
    """
    config = {**DEFAULT_CONFIG, **(config or {})}
    root = logging.getLogger(ROOT_LOGGER_NAME)

    # Set logging level
    level = getattr(logging, str(config.get('level', 'INFO')).upper())
    root.setLevel(level)

    # Remove existing handlers
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # Create formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # File handler
    log_file = config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        root.addHandler(file_handler)

    # Console handler
    if config.get('console', True):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        root.addHandler(console_handler)

    return root


class Logger:
    """Thin wrapper giving module loggers a uniform call style"""

    def __init__(self, name=ROOT_LOGGER_NAME):
        """
        Initialize logger

        Args:
            name: Logger name, normally the module's ``__name__``
        """
        self.name = name
        self.logger = logging.getLogger(name)

    def debug(self, message, **kwargs):
        """Log debug message"""
        self.logger.debug(message, extra=kwargs)

    def info(self, message, **kwargs):
        """Log info message"""
        self.logger.info(message, extra=kwargs)

    def warning(self, message, **kwargs):
        """Log warning message"""
        self.logger.warning(message, extra=kwargs)

    def error(self, message, exc_info=None, **kwargs):
        """Log error message, with traceback when ``exc_info`` is given"""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)


def get_logger(name=ROOT_LOGGER_NAME):
    """
    Get a logger for a module

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return Logger(name)
