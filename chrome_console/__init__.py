"""
Chrome Console MCP 核心模块
通过 Chrome DevTools Protocol 暴露浏览器控制台、脚本执行与页面导航
"""

from .service import ConsoleService, create_service, get_service

__all__ = [
    'ConsoleService',
    'create_service',
    'get_service'
]

__version__ = '1.0.0'
