"""
资源提供者
以固定 URI 暴露控制台日志的只读快照
"""

from chrome_console.console.log_buffer import ConsoleLogBuffer
from chrome_console.errors import ValidationError
from chrome_console.models import ResourceContents
from chrome_console.tools.dispatcher import NO_LOGS_MESSAGE

CONSOLE_LOGS_URI = "console://logs"
CONSOLE_LOGS_NAME = "consoleLogs"


class ResourceProvider:
    """资源提供者

    读取时不会建立浏览器会话，只返回当前缓冲区的内容。
    """

    def __init__(self, log_buffer: ConsoleLogBuffer):
        self.log_buffer = log_buffer

    def read(self, uri: str = CONSOLE_LOGS_URI) -> ResourceContents:
        if uri != CONSOLE_LOGS_URI:
            raise ValidationError(f"未知资源: {uri}")
        entries = self.log_buffer.read_all()
        return ResourceContents(
            uri=CONSOLE_LOGS_URI,
            text="\n".join(entries) if entries else NO_LOGS_MESSAGE
        )
