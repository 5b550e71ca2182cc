"""
CDP 模块初始化
暴露 CDP 客户端与会话管理器
"""

from .cdp_client import CDPClient
from .session_manager import CDPSessionManager

__all__ = [
    'CDPClient',
    'CDPSessionManager'
]
