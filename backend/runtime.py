"""
后台事件循环
Flask 请求线程通过 run_coroutine_threadsafe 把协程提交到同一个循环中执行，
保证 CDP 会话与日志缓冲区始终只在一个事件循环里被访问
"""

import asyncio
import logging
import threading
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class LoopRuntime:
    """在守护线程中运行的事件循环"""

    def __init__(self, name: str = 'cdp-loop'):
        self.name = name
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._started.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self._started.wait()
        logger.debug(f'Event loop thread started: {self.name}')

    def _run(self) -> None:
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self._started.set()
        try:
            self.loop.run_forever()
        finally:
            self.loop.close()

    def run(self, coro: Awaitable[Any], timeout: Optional[float] = None) -> Any:
        """在后台循环中执行协程并等待结果

        Args:
            coro: 要执行的协程
            timeout: 等待秒数，None 表示一直等待

        Returns:
            协程的返回值
        """
        if self.loop is None or not self.loop.is_running():
            self.start()
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return fut.result(timeout=timeout)

    def stop(self) -> None:
        if self.loop is not None and self.loop.is_running():
            self.loop.call_soon_threadsafe(self.loop.stop)
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._thread = None
