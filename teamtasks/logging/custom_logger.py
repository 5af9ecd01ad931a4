"""
Custom logger with per-level formatting
Levels: warning, info, request, error, slow, great
"""
import logging
import sys
import traceback
from typing import Any, Dict, Optional

from teamtasks.core.config import settings
from teamtasks.helpers.getters import isDebugMode
from teamtasks.logging.formatters import get_formatter_for_level
from teamtasks.logging.log_levels import LogLevel

LIBRARY_FRAMES = ("site-packages", "/usr/local/lib/python", "/usr/lib/python")


class CustomLogger:
    """
    Logger wrapper that renders each line with the formatter of its level.
    Keyword arguments become `key=value` context on the line.

    Usage:
        logger = get_logger(__name__)
        logger.info("Team created", team_id=team.id)
        logger.error("Could not archive user", user_id=user.id)

        request_logger = logger.bind(request_id=request_id)
        request_logger.request("API request", method="GET", path="/api/teams/", status_code=200, duration=0.02)
    """

    def __init__(self, name: str, bound: Optional[Dict[str, Any]] = None):
        self.name = name
        self.bound = dict(bound or {})
        self.logger = logging.getLogger(name)
        if bound is not None:
            # Bound copies share the handler of the named logger
            return

        self.logger.setLevel(logging.DEBUG if isDebugMode() else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
        self.logger.propagate = False
        self.logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(message)s'))
        self.logger.addHandler(handler)

    def bind(self, **context: Any) -> "CustomLogger":
        """Copy of this logger that adds `context` to every line"""
        return CustomLogger(self.name, {**self.bound, **context})

    def _log(self, level: LogLevel, message: str, exc_info: bool = False, **context: Any) -> None:
        context = {**self.bound, **context}
        if not self.logger.isEnabledFor(level.stdlib_level):
            return

        record = logging.LogRecord(
            name=self.name,
            level=level.stdlib_level,
            pathname="",
            lineno=0,
            msg=message,
            args=(),
            exc_info=None,
        )
        record.context = context
        line = get_formatter_for_level(level).format(record)

        trace = self._app_traceback() if exc_info else ""
        if trace:
            line += "\n" + trace

        self.logger.log(level.stdlib_level, line, extra={"custom_data": {"level": level.value, **context}})

    @staticmethod
    def _app_traceback() -> str:
        """Traceback of the exception being handled, library frames left out"""
        lines = traceback.format_exc().splitlines()
        if not lines or lines[0] == "NoneType: None":
            return ""

        kept = []
        skip_source = False
        for line in lines:
            if not line.strip():
                continue
            if line.lstrip().startswith('File "'):
                skip_source = any(frame in line for frame in LIBRARY_FRAMES)
                if skip_source:
                    continue
            elif skip_source and line.startswith("    "):
                continue
            kept.append(line)
        return "\n".join(kept)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def request(self, message: str, method: str, path: str, status_code: int, duration: float, **context: Any) -> None:
        """One line per HTTP request, written by the access middleware"""
        self._log(
            LogLevel.REQUEST,
            message,
            method=method,
            path=path,
            status_code=status_code,
            duration=duration,
            **context
        )

    def error(self, message: str, exc_info: bool = True, **context: Any) -> None:
        """
        Failure that needs attention. The traceback of the exception being
        handled, if any, is appended unless exc_info is False.

        Example:
            except DatabaseError as e:
                logger.error("Team creation failed", exc_info=False, error_detail=str(e))
        """
        self._log(LogLevel.ERROR, message, exc_info=exc_info, **context)

    def slow(self, message: str, duration: float, threshold: float = 1.0, **context: Any) -> None:
        """Operation that took longer than `threshold` seconds"""
        self._log(LogLevel.SLOW, message, duration=duration, threshold=threshold, **context)

    def great(self, message: str, **context: Any) -> None:
        """Noteworthy success, e.g. a new registration"""
        self._log(LogLevel.GREAT, message, **context)


_loggers: Dict[str, CustomLogger] = {}


def get_logger(name: str) -> CustomLogger:
    """
    Shared CustomLogger per name

    Usage:
        from teamtasks.logging import get_logger
        logger = get_logger(__name__)
    """
    if name not in _loggers:
        _loggers[name] = CustomLogger(name)
    return _loggers[name]
