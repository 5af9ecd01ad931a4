"""
Application logging: a thin wrapper over stdlib logging with extra levels
(request, slow, great) and a formatter per level.
"""
from teamtasks.logging.custom_logger import CustomLogger, get_logger
from teamtasks.logging.log_levels import LogLevel

__all__ = [
    'CustomLogger',
    'LogLevel',
    'get_logger',
]
