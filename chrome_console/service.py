"""
进程级服务对象
将日志缓冲区、会话管理器、工具分发器与资源提供者组装在一起
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from chrome_console.cdp.cdp_client import CDPClient
from chrome_console.cdp.session_manager import CDPSessionManager
from chrome_console.console.log_buffer import ConsoleLogBuffer
from chrome_console.tools.dispatcher import ToolDispatcher
from chrome_console.tools.resources import ResourceProvider

logger = logging.getLogger(__name__)


@dataclass
class ConsoleService:
    """进程内共享的全部组件"""
    log_buffer: ConsoleLogBuffer
    session_manager: CDPSessionManager
    dispatcher: ToolDispatcher
    resources: ResourceProvider


def create_service(app_config=None, connector: Optional[Callable[[], Awaitable[Any]]] = None) -> ConsoleService:
    """根据配置创建服务对象

    Args:
        app_config: 配置对象（需提供 get 方法），默认使用 backend.config.config
        connector: 自定义连接函数，默认连接配置中的远程调试端点

    Returns:
        ConsoleService: 组装好的服务
    """
    if app_config is None:
        from backend.config import config as app_config

    if connector is None:
        connector = functools.partial(
            CDPClient.connect_to_existing,
            host=app_config.get('cdp.host', '127.0.0.1'),
            port=int(app_config.get('cdp.port', 9222)),
            ws_endpoint=app_config.get('cdp.ws_endpoint'),
            target_url=app_config.get('cdp.target_url')
        )

    log_buffer = ConsoleLogBuffer(max_entries=app_config.get('console.max_entries'))
    session_manager = CDPSessionManager(
        log_buffer,
        connector,
        auto_reconnect=bool(app_config.get('cdp.auto_reconnect', False))
    )
    logger.debug(f"Console service created (cdp={app_config.get('cdp.host')}:{app_config.get('cdp.port')})")
    return ConsoleService(
        log_buffer=log_buffer,
        session_manager=session_manager,
        dispatcher=ToolDispatcher(session_manager, log_buffer),
        resources=ResourceProvider(log_buffer)
    )


_service = None


def get_service() -> ConsoleService:
    """获取服务单例"""
    global _service
    if _service is None:
        _service = create_service()
    return _service
