"""
控制台日志模块
"""

from .log_buffer import ConsoleLogBuffer, format_console_message

__all__ = [
    'ConsoleLogBuffer',
    'format_console_message'
]
