"""
工具与资源模块
"""

from .dispatcher import ToolDispatcher, TOOL_DEFINITIONS, NO_LOGS_MESSAGE, NO_RETURN_VALUE_MESSAGE
from .resources import ResourceProvider, CONSOLE_LOGS_URI, CONSOLE_LOGS_NAME

__all__ = [
    'ToolDispatcher',
    'TOOL_DEFINITIONS',
    'NO_LOGS_MESSAGE',
    'NO_RETURN_VALUE_MESSAGE',
    'ResourceProvider',
    'CONSOLE_LOGS_URI',
    'CONSOLE_LOGS_NAME'
]
