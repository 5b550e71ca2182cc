"""
控制台日志缓冲区
由 Console.messageAdded 事件持续写入，供工具与资源读取
"""

import logging
from collections import deque
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def format_console_message(message: Dict[str, Any]) -> str:
    """将 Console.messageAdded 事件中的 message 格式化为 `[<level>] <text>`"""
    level = message.get('level', 'log')
    text = message.get('text', '')
    return f"[{level}] {text}"


class ConsoleLogBuffer:
    """进程内的控制台日志存储

    只追加、按到达顺序保存。所有写入都来自同一个事件循环，因此不加锁。

    Attributes:
        max_entries: 最大条目数，None 表示不限制；超出时丢弃最早的条目
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be a positive integer or None")
        self.max_entries = max_entries
        self._entries: deque = deque(maxlen=max_entries)
        self._listeners: List[Callable[[str], None]] = []

    def append(self, entry: str) -> None:
        """追加一条日志并通知订阅者"""
        self._entries.append(entry)
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception as e:
                logger.error(f"Console log listener failed: {e}")

    def append_message(self, message: Dict[str, Any]) -> str:
        """格式化并追加一条 Console 消息，返回写入的条目"""
        entry = format_console_message(message)
        self.append(entry)
        return entry

    def read_all(self) -> List[str]:
        """按到达顺序返回所有日志的快照"""
        return list(self._entries)

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[str], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __len__(self) -> int:
        return len(self._entries)
