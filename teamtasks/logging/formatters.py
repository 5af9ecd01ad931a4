import logging
from typing import Dict

from teamtasks.logging.log_levels import LogLevel

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LevelFormatter(logging.Formatter):
    """Prefixes each line with the custom level tag and appends the context fields"""

    def __init__(self, tag: str, with_name: bool = True):
        name = ' - %(name)s' if with_name else ''
        super().__init__(f'[{tag}] %(asctime)s{name} - %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, 'context', None)
        if context:
            line += ' | ' + ' '.join(f'{key}={value}' for key, value in context.items())
        return line


_FORMATTERS: Dict[LogLevel, logging.Formatter] = {
    LogLevel.ERROR: LevelFormatter('ERROR'),
    LogLevel.WARNING: LevelFormatter('WARNING'),
    LogLevel.INFO: LevelFormatter('INFO'),
    LogLevel.REQUEST: LevelFormatter('REQUEST', with_name=False),
    LogLevel.SLOW: LevelFormatter('SLOW'),
    LogLevel.GREAT: LevelFormatter('GREAT'),
}


def get_formatter_for_level(level: LogLevel) -> logging.Formatter:
    """Returns the formatter for a custom level"""
    return _FORMATTERS.get(level) or logging.Formatter(DEFAULT_FORMAT)
