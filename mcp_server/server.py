"""
MCP 服务器
通过 FastMCP 将三个工具与控制台日志资源暴露给 AI 代理
"""

import logging
from typing import Annotated, List

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent
from pydantic import Field

from chrome_console.models import ToolResponse
from chrome_console.service import ConsoleService
from chrome_console.tools import CONSOLE_LOGS_NAME, CONSOLE_LOGS_URI, TOOL_DEFINITIONS

logger = logging.getLogger(__name__)

SERVER_NAME = "chrome-console"
SERVER_INSTRUCTIONS = "访问Chrome浏览器控制台并执行JavaScript"
DEFAULT_SSE_PATH = "/mcp"


def to_text_content(response: ToolResponse) -> List[TextContent]:
    """将 ToolResponse 转换为 MCP 文本内容块

    失败同样作为普通结果返回，调用方看到的是可读的错误文本而不是协议错误。
    """
    return [TextContent(type="text", text=block.text) for block in response.content]


def create_mcp_server(service: ConsoleService, host: str = "127.0.0.1", port: int = 8000,
                      sse_path: str = DEFAULT_SSE_PATH) -> FastMCP:
    """创建并注册工具与资源

    Args:
        service: 进程级服务对象
        host: SSE 监听地址
        port: SSE 监听端口
        sse_path: SSE 端点路径

    Returns:
        FastMCP: 配置好的服务器实例
    """
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, host=host, port=port,
                  sse_path=sse_path)
    dispatcher = service.dispatcher

    @mcp.tool(name="getConsoleLogs", description=TOOL_DEFINITIONS['getConsoleLogs']['description'])
    async def get_console_logs():
        return to_text_content(await dispatcher.get_console_logs())

    @mcp.tool(name="executeJavaScript", description=TOOL_DEFINITIONS['executeJavaScript']['description'])
    async def execute_javascript(script: Annotated[str, Field(description="要执行的JavaScript代码")]):
        return to_text_content(await dispatcher.execute_javascript(script))

    @mcp.tool(name="navigateTo", description=TOOL_DEFINITIONS['navigateTo']['description'])
    async def navigate_to(url: Annotated[str, Field(description="要导航到的URL")]):
        return to_text_content(await dispatcher.navigate_to(url))

    @mcp.resource(CONSOLE_LOGS_URI, name=CONSOLE_LOGS_NAME, description="Chrome控制台日志",
                  mime_type="text/plain")
    def console_logs() -> str:
        return service.resources.read(CONSOLE_LOGS_URI).text

    logger.debug(f"MCP server '{SERVER_NAME}' registered {len(TOOL_DEFINITIONS)} tools")
    return mcp
