"""
Logging setup shared by the API and service modules
"""
import logging
import sys
from backend.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level() -> int:
    if settings.LOG_LEVEL:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO
    return logging.DEBUG if settings.DEBUG else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Stdout logger for a module; handlers are attached once per name"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(_level())
    return logger
