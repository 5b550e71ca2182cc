"""
CDP 会话管理器
进程内唯一的浏览器会话：首次使用时建立，之后所有工具调用共享
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Optional

from chrome_console.console.log_buffer import ConsoleLogBuffer
from chrome_console.errors import BrowserConnectionError, TransportError
from chrome_console.models import SessionState

logger = logging.getLogger(__name__)

CONNECT_FAILED_MESSAGE = "无法连接到Chrome浏览器。请确保Chrome已启动并开启了远程调试端口。"
CONNECTION_LOST_MESSAGE = "与Chrome浏览器的连接已断开，请重置会话后重试。"

# 建立会话时启用的域
DEFAULT_DOMAINS = ("Runtime", "Console")


class CDPSessionManager:
    """CDP 会话管理器

    状态机: unconnected -> connecting -> ready (-> disconnected)。
    并发调用 ensure_session() 的协程共享同一个创建中的 future，
    因此同一时刻最多只有一次连接尝试。

    Attributes:
        auto_reconnect: 连接断开后是否在下一次调用时自动重连
    """

    def __init__(self, log_buffer: ConsoleLogBuffer,
                 connector: Callable[[], Awaitable[Any]],
                 auto_reconnect: bool = False):
        """
        Args:
            log_buffer: 接收控制台消息的日志缓冲区
            connector: 无参协程函数，返回已附着到页面的 CDP 客户端
            auto_reconnect: 连接断开后是否自动重连
        """
        self.log_buffer = log_buffer
        self.auto_reconnect = auto_reconnect
        self._connector = connector
        self._state = SessionState.UNCONNECTED
        self._client = None
        self._pending: Optional[asyncio.Future] = None
        self._enabled_domains = set()
        self._connect_attempts = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def enabled_domains(self) -> FrozenSet[str]:
        return frozenset(self._enabled_domains)

    @property
    def connect_attempts(self) -> int:
        """累计连接尝试次数"""
        return self._connect_attempts

    @property
    def is_ready(self) -> bool:
        return self._state is SessionState.READY

    async def ensure_session(self):
        """返回可用的 CDP 客户端，必要时建立连接

        Returns:
            已启用 Runtime 与 Console 域的 CDP 客户端

        Raises:
            BrowserConnectionError: 首次连接失败（会话保持未设置，下次调用会重试）
            TransportError: 已建立的连接断开且未开启自动重连
        """
        if self.is_ready:
            return self._client

        if self._state is SessionState.DISCONNECTED:
            if not self.auto_reconnect:
                raise TransportError(CONNECTION_LOST_MESSAGE)
            logger.info("Browser connection lost, reconnecting")
            await self.reset()

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._create_session())
        return await asyncio.shield(self._pending)

    async def _create_session(self):
        self._state = SessionState.CONNECTING
        self._connect_attempts += 1
        client = None
        try:
            client = await self._connector()
            client.on("Console.messageAdded", self._handle_console_message)
            client.on_disconnect(lambda *args: self._handle_disconnect(client))
            for domain in DEFAULT_DOMAINS:
                await client.send(f"{domain}.enable")
        except Exception as e:
            logger.error(f"连接Chrome失败: {e}")
            self._state = SessionState.UNCONNECTED
            self._pending = None
            self._enabled_domains = set()
            if client is not None:
                await self._disconnect_quietly(client)
            raise BrowserConnectionError(CONNECT_FAILED_MESSAGE) from e

        self._client = client
        self._enabled_domains = set(DEFAULT_DOMAINS)
        self._state = SessionState.READY
        logger.info("已成功连接到Chrome浏览器")
        return client

    async def enable_domain(self, domain: str) -> None:
        """在当前会话中启用指定域（每个会话只发送一次 <domain>.enable）"""
        client = await self.ensure_session()
        if domain in self._enabled_domains:
            return
        self._enabled_domains.add(domain)
        try:
            await client.send(f"{domain}.enable")
        except Exception:
            self._enabled_domains.discard(domain)
            raise
        logger.debug(f"Enabled CDP domain: {domain}")

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """确保会话存在后发送CDP命令"""
        client = await self.ensure_session()
        return await client.send(method, params)

    async def reset(self) -> None:
        """丢弃当前会话，下一次 ensure_session() 将重新连接"""
        pending = self._pending
        if pending is not None and not pending.done():
            try:
                await asyncio.shield(pending)
            except BrowserConnectionError:
                logger.debug("Pending connection failed during reset")

        client = self._client
        self._client = None
        self._pending = None
        self._enabled_domains = set()
        self._state = SessionState.UNCONNECTED
        if client is not None:
            await self._disconnect_quietly(client)
            logger.info("CDP session reset")

    def _handle_console_message(self, event: Dict[str, Any]) -> None:
        message = event.get("message") or {}
        self.log_buffer.append_message(message)

    def _handle_disconnect(self, client) -> None:
        if client is not self._client:
            return
        logger.warning("Browser connection lost")
        self._client = None
        self._pending = None
        self._enabled_domains = set()
        self._state = SessionState.DISCONNECTED

    @staticmethod
    async def _disconnect_quietly(client) -> None:
        try:
            await client.disconnect()
        except Exception as e:
            logger.warning(f"Failed to disconnect from browser: {e}")
