"""
MCP 传输适配层
"""

from .server import create_mcp_server, to_text_content

__all__ = [
    'create_mcp_server',
    'to_text_content'
]
