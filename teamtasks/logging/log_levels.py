"""
Custom log levels and how they map onto stdlib levels
"""
import logging
from enum import Enum


class LogLevel(str, Enum):
    """Custom log levels"""
    WARNING = "warning"
    INFO = "info"
    REQUEST = "request"
    ERROR = "error"
    SLOW = "slow"
    GREAT = "great"

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.REQUEST: logging.INFO,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.SLOW: logging.WARNING,
    LogLevel.GREAT: logging.INFO,
}
