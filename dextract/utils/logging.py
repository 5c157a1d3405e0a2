# dextract/utils/logging.py
from loguru import logger
import sys
from pathlib import Path
from typing import Optional, Union

from dextract.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} | {message}"


class AppLogger:
    """Centralized logging configuration for the application"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.configured = False
        return cls._instance

    def configure(self, config: Optional[LoggingConfig] = None):
        config = config or LoggingConfig()

        # Remove default logger
        logger.remove()
        logger.configure(extra={"module": "app"})

        logger.add(
            sys.stdout,
            colorize=True,
            format=CONSOLE_FORMAT,
            level=config.level,
        )

        if config.log_dir:
            log_path = Path(config.log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            logger.add(
                log_path / "app.log",
                rotation="500 MB",
                retention="10 days",
                compression="zip",
                format=FILE_FORMAT,
                level=config.level,
            )
            logger.add(
                log_path / "error.log",
                rotation="100 MB",
                retention="30 days",
                compression="zip",
                format=FILE_FORMAT,
                level="ERROR",
            )

        self.configured = True

    @staticmethod
    def get_logger(name: Union[str, None] = None):
        """Get a logger instance for a specific module"""
        return logger.bind(module=name if name else "app")


app_logger = AppLogger()


def setup_logging(config: Optional[LoggingConfig] = None):
    app_logger.configure(config)


def get_logger(name: Union[str, None] = None):
    return app_logger.get_logger(name)
