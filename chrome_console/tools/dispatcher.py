"""
工具分发器
getConsoleLogs / executeJavaScript / navigateTo 三个工具的实现

每个工具都自行调用 ensure_session()，失败时返回文本错误而不是抛出异常。
"""

import logging
from typing import Any, Dict, Optional

from chrome_console.cdp.session_manager import CDPSessionManager
from chrome_console.console.log_buffer import ConsoleLogBuffer
from chrome_console.errors import BrowserConnectionError, TransportError, ValidationError
from chrome_console.models import ErrorKind, EvaluationResult, ToolResponse
from chrome_console.utils import format_remote_value, measure_time, validate_url

logger = logging.getLogger(__name__)

NO_LOGS_MESSAGE = "没有控制台日志"
NO_RETURN_VALUE_MESSAGE = "执行成功，无返回值"

TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    'getConsoleLogs': {
        'description': '获取Chrome控制台日志',
        'input_schema': {
            'type': 'object',
            'properties': {}
        }
    },
    'executeJavaScript': {
        'description': '在Chrome页面中执行JavaScript代码',
        'input_schema': {
            'type': 'object',
            'properties': {
                'script': {'type': 'string', 'description': '要执行的JavaScript代码'}
            },
            'required': ['script']
        }
    },
    'navigateTo': {
        'description': '导航到指定URL',
        'input_schema': {
            'type': 'object',
            'properties': {
                'url': {'type': 'string', 'format': 'uri', 'description': '要导航到的URL'}
            },
            'required': ['url']
        }
    }
}


def _error_kind(error: Exception) -> ErrorKind:
    if isinstance(error, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(error, TransportError):
        return ErrorKind.TRANSPORT
    if isinstance(error, BrowserConnectionError):
        return ErrorKind.CONNECTION
    return ErrorKind.INTERNAL


class ToolDispatcher:
    """工具分发器

    不持有会话本身，每次调用都通过会话管理器获取，
    因此任一工具建立的会话都会被后续工具直接复用。
    """

    def __init__(self, session_manager: CDPSessionManager, log_buffer: ConsoleLogBuffer):
        self.session_manager = session_manager
        self.log_buffer = log_buffer

    @staticmethod
    def _failure(prefix: str, error: Exception) -> ToolResponse:
        logger.error(f"{prefix}{error}")
        return ToolResponse.failure(f"{prefix}{error}", _error_kind(error))

    @measure_time
    async def get_console_logs(self) -> ToolResponse:
        """返回全部控制台日志（换行分隔），没有日志时返回提示文本"""
        try:
            await self.session_manager.ensure_session()
        except Exception as e:
            return self._failure("错误: ", e)

        entries = self.log_buffer.read_all()
        return ToolResponse.success("\n".join(entries) if entries else NO_LOGS_MESSAGE)

    @measure_time
    async def execute_javascript(self, script: str) -> ToolResponse:
        """在页面主执行上下文中执行脚本，按值返回结果

        Args:
            script: JavaScript 代码

        Returns:
            ToolResponse: 执行错误、无返回值或 `结果 (<type>): <json>` 三者之一
        """
        try:
            if not isinstance(script, str):
                raise ValidationError("script 必须是字符串")
            response = await self.session_manager.send("Runtime.evaluate", {
                "expression": script,
                "returnByValue": True
            })
        except Exception as e:
            return self._failure("错误: ", e)

        result = EvaluationResult.from_cdp(response)
        if result.is_exception:
            logger.info(f"Script raised an exception: {result.exception_text}")
            return ToolResponse.failure(f"执行错误: {result.exception_text}", ErrorKind.EVALUATION)
        if result.is_undefined:
            return ToolResponse.success(NO_RETURN_VALUE_MESSAGE)
        try:
            text = format_remote_value(result.value_type, result.value, result.has_value,
                                       result.unserializable_value)
        except (TypeError, ValueError) as e:
            return self._failure("错误: ", e)
        return ToolResponse.success(text)

    @measure_time
    async def navigate_to(self, url: str) -> ToolResponse:
        """导航到指定URL，不等待页面加载完成

        URL 在任何会话操作之前校验。
        """
        try:
            url = validate_url(url)
            await self.session_manager.enable_domain("Page")
            response = await self.session_manager.send("Page.navigate", {"url": url})
        except Exception as e:
            return self._failure("导航错误: ", e)

        error_text = (response or {}).get("errorText")
        if error_text:
            logger.warning(f"Navigation to {url} failed: {error_text}")
            return ToolResponse.failure(f"导航错误: {error_text}", ErrorKind.TRANSPORT)
        logger.info(f"Navigated to {url}")
        return ToolResponse.success(f"已导航到 {url}")

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """按工具名称分发调用

        Args:
            name: 工具名称
            arguments: 工具参数

        Returns:
            ToolResponse: 工具响应；未知工具或参数缺失时返回校验错误
        """
        arguments = arguments or {}
        if name == 'getConsoleLogs':
            return await self.get_console_logs()
        if name == 'executeJavaScript':
            if not isinstance(arguments.get('script'), str):
                return ToolResponse.failure("错误: 缺少参数 script", ErrorKind.VALIDATION)
            return await self.execute_javascript(arguments['script'])
        if name == 'navigateTo':
            if not isinstance(arguments.get('url'), str):
                return ToolResponse.failure("导航错误: 缺少参数 url", ErrorKind.VALIDATION)
            return await self.navigate_to(arguments['url'])
        return ToolResponse.failure(f"错误: 未知工具 {name}", ErrorKind.VALIDATION)
