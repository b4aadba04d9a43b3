"""
Logging Module

Named loggers for the engine's modules. Each logger writes to stderr and,
when enabled through the ``logging`` section of engine_config.yaml, to a
rotating file under ``log_dir``.
"""

import sys
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class Logger:
    """
    Cache of configured loggers, one per module name.

    Example:
        >>> logger = Logger.get_logger('tables')
        >>> logger.info("Loaded 74 rules")
        >>> Logger.configure({'level': 'DEBUG'})   # also affects 'tables'
    """

    _loggers: Dict[str, logging.Logger] = {}

    @staticmethod
    def get_logger(
        name: str,
        log_dir: Union[str, Path] = 'logs',
        log_file: Optional[str] = None,
        level: int = logging.INFO,
        console_output: bool = True,
        file_output: bool = False,
        rotation: str = 'size'  # 'size' or 'time'
    ) -> logging.Logger:
        """
        Get or create a logger instance.

        Args:
            name: Logger name (typically module name)
            log_dir: Directory to store log files
            log_file: Log file name (auto-generated if None)
            level: Logging level
            console_output: Write to stderr
            file_output: Also write to a rotating file (off for library use)
            rotation: Rotation strategy ('size' or 'time')

        Returns:
            Configured logger instance
        """
        if name in Logger._loggers:
            return Logger._loggers[name]

        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers = []

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(console_handler)

        if file_output:
            logger.addHandler(
                Logger._create_file_handler(name, log_dir, log_file, level, rotation)
            )

        # not propagated to the root logger
        logger.propagate = False

        Logger._loggers[name] = logger
        return logger

    @staticmethod
    def _create_file_handler(
        name: str,
        log_dir: Union[str, Path],
        log_file: Optional[str],
        level: int,
        rotation: str,
    ) -> logging.Handler:
        """Size-rotated (10MB x 5) or daily-rotated (30 days) file handler."""
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        if log_file is None:
            log_file = f"{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        log_path = log_dir / log_file

        if rotation == 'size':
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8'
            )
        else:
            file_handler = TimedRotatingFileHandler(
                log_path,
                when='midnight',
                interval=1,
                backupCount=30,
                encoding='utf-8'
            )

        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        return file_handler

    @staticmethod
    def set_level(logger: logging.Logger, level: int) -> None:
        """Change the level of a logger and all its handlers."""
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    @staticmethod
    def configure(logging_config: Mapping[str, Any]) -> None:
        """
        Apply the ``logging`` section of engine_config.yaml to every
        logger created so far.

        Args:
            logging_config: Mapping with optional keys level, file_output,
                            log_dir, rotation

        Raises:
            ValueError: If the level name is unknown
        """
        level = logging.getLevelName(str(logging_config.get('level', 'INFO')).upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {logging_config.get('level')}")

        file_output = bool(logging_config.get('file_output', False))
        log_dir = logging_config.get('log_dir', 'logs')
        rotation = logging_config.get('rotation', 'size')

        for name, logger in Logger._loggers.items():
            Logger.set_level(logger, level)
            has_file = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
            if file_output and not has_file:
                logger.addHandler(
                    Logger._create_file_handler(name, log_dir, None, level, rotation)
                )


def get_logger(name: str, **kwargs) -> logging.Logger:
    """Shorthand for Logger.get_logger."""
    return Logger.get_logger(name, **kwargs)
