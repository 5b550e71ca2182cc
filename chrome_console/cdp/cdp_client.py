import logging
from typing import Any, Callable, Dict, List, Optional

import aiohttp
from pyppeteer import connect
from pyppeteer.errors import NetworkError

from chrome_console.errors import BrowserConnectionError, CommandError, TransportError
from chrome_console.utils import url_matches

logger = logging.getLogger(__name__)

# pyppeteer 用同一个 NetworkError 表示协议错误和连接关闭，只能按消息区分
CLOSED_MARKERS = ("Session closed", "Target closed", "Connection is closed", "Connection closed")


class CDPClient:
    """DevTools Protocol客户端

    该类封装了与已启动浏览器之间的CDP会话，负责发现调试端点、附着到页面目标，
    并提供CDP命令发送与事件订阅。浏览器进程本身不由本类启动或关闭。
    """

    def __init__(self, browser, client, page=None):
        """初始化CDP客户端

        Args:
            browser: Pyppeteer浏览器实例
            client: 附着在页面目标上的CDP会话
            page: 会话所属的页面
        """
        self.browser = browser
        self.client = client
        self.page = page

    @staticmethod
    async def _fetch_json(url: str) -> Optional[Any]:
        try:
            timeout = aiohttp.ClientTimeout(total=2)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as resp:
                    if resp.status != 200:
                        return None
                    return await resp.json(content_type=None)
        except Exception as e:
            logger.debug(f"Failed to fetch {url}: {e}")
            return None

    @classmethod
    async def _get_ws_endpoint_from_version(cls, host: str, port: int) -> Optional[str]:
        data = await cls._fetch_json(f"http://{host}:{port}/json/version")
        if isinstance(data, dict):
            return data.get("webSocketDebuggerUrl")
        return None

    @classmethod
    async def _gather_ws_candidates(cls, host: str, port: int, known_ws_endpoint: Optional[str]) -> List[str]:
        """收集所有可能的WebSocket端点候选

        按优先级顺序:
        1. 配置中指定的端点
        2. /json/version接口返回的端点

        Args:
            host: 调试主机
            port: 调试端口
            known_ws_endpoint: 已知的WebSocket端点

        Returns:
            WebSocket端点URL列表（按优先级排序）
        """
        candidates: List[str] = []
        if known_ws_endpoint:
            candidates.append(known_ws_endpoint.strip())

        version_endpoint = await cls._get_ws_endpoint_from_version(host, port)
        if version_endpoint:
            candidates.append(version_endpoint)
            logger.debug(f"Added endpoint from /json/version: {version_endpoint}")

        return candidates

    @classmethod
    async def connect_to_existing(cls, host: str = "127.0.0.1", port: int = 9222,
                                  ws_endpoint: Optional[str] = None,
                                  target_url: Optional[str] = None) -> 'CDPClient':
        """连接到已启动的浏览器实例并获取CDP会话

        Args:
            host: 远程调试主机
            port: 远程调试端口
            ws_endpoint: 已知的浏览器WebSocket端点
            target_url: 优先附着的页面URL（前缀匹配），为空时使用第一个页面

        Returns:
            CDPClient: 附着在页面上的客户端

        Raises:
            BrowserConnectionError: 所有连接方式均失败时抛出
        """
        browser = None
        errors = []

        ws_candidates = await cls._gather_ws_candidates(host, port, ws_endpoint)
        logger.info(f"Attempting to connect to browser on {host}:{port}")

        tried = set()
        for endpoint in ws_candidates:
            if not endpoint or endpoint in tried:
                continue
            tried.add(endpoint)
            try:
                logger.debug(f"Trying to connect via: {endpoint}")
                browser = await connect(browserWSEndpoint=endpoint, defaultViewport=None)
                logger.info(f"Successfully connected to browser via {endpoint}")
                break
            except Exception as conn_err:
                errors.append(f"{endpoint} -> {conn_err}")

        if browser is None:
            if not errors:
                errors.append(f"http://{host}:{port}/json/version -> 未返回 webSocketDebuggerUrl")
            logger.error(f"All connection attempts failed. Errors: {errors}")
            raise BrowserConnectionError(
                f"无法连接到浏览器的远程调试端口 {host}:{port}。\n"
                f"详细错误:\n" + "\n".join(f"  - {err}" for err in errors)
            )

        try:
            pages = await browser.pages()
            page = None
            if target_url:
                for p in pages:
                    if p.url and url_matches(p.url, target_url):
                        page = p
                        break
            if page is None:
                page = pages[0] if pages else await browser.newPage()
            client = await page.target.createCDPSession()
        except Exception as e:
            await browser.disconnect()
            raise BrowserConnectionError(f"无法附着到页面目标: {e}") from e

        logger.info(f"Attached to page: {page.url or 'about:blank'}")
        return cls(browser, client, page)

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """发送CDP命令

        Args:
            method: CDP命令名称
            params: CDP命令参数

        Returns:
            dict: CDP命令执行结果

        Raises:
            TransportError: 会话已关闭或连接中断时抛出
            CommandError: 浏览器拒绝了命令（协议错误），会话仍然可用
        """
        try:
            return await self.client.send(method, params or {})
        except NetworkError as e:
            if any(marker in str(e) for marker in CLOSED_MARKERS):
                raise TransportError(f"与浏览器的连接已中断: {e}") from e
            raise CommandError(str(e)) from e

    def on(self, event: str, handler: Callable[[Dict[str, Any]], None]) -> None:
        """订阅CDP事件"""
        self.client.on(event, handler)

    def on_disconnect(self, callback: Callable[[], None]) -> None:
        """浏览器连接断开时回调"""
        self.browser.on('disconnected', callback)

    async def disconnect(self) -> None:
        """断开与浏览器的连接

        只关闭WebSocket连接，不关闭浏览器本身。
        """
        await self.browser.disconnect()
