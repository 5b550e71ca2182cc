import argparse
import logging
import sys

from backend.config import config
from chrome_console.service import get_service
from mcp_server.server import create_mcp_server

# 本模块是 Chrome Console MCP 服务器的命令行入口
# 支持三种传输方式：
# 1. sse：通过 HTTP Server-Sent Events 提供 MCP 服务（默认）
# 2. stdio：通过标准输入输出提供 MCP 服务，供桌面客户端直接拉起
# 3. http：Flask REST / WebSocket 桥接

logger = logging.getLogger(__name__)

TRANSPORTS = ('sse', 'stdio', 'http')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='chrome-console-mcp',
        description='访问Chrome浏览器控制台并执行JavaScript的MCP服务器'
    )
    parser.add_argument('--transport', choices=TRANSPORTS, default='sse',
                        help='传输方式，默认 sse')
    parser.add_argument('--host', default=None, help='监听地址，默认读取配置 server.host')
    parser.add_argument('--port', type=int, default=None,
                        help='监听端口，默认读取环境变量 PORT 或配置 server.port（8000）')
    return parser.parse_args(argv)


def configure_logging():
    # 日志统一输出到 stderr，stdio 传输下 stdout 只能用于协议消息
    logging.basicConfig(
        stream=sys.stderr,
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def cli(argv=None):
    """主函数：解析参数，按所选传输方式启动服务"""
    args = parse_args(argv)
    configure_logging()

    host = args.host or config.get('server.host', '127.0.0.1')
    port = args.port or int(config.get('server.port', 8000))
    sse_path = config.get('server.sse_path', '/mcp')

    if args.transport == 'http':
        from backend.app import run_bridge
        run_bridge(host, port)
        return

    server = create_mcp_server(get_service(), host=host, port=port, sse_path=sse_path)
    if args.transport == 'sse':
        logger.info(f'Chrome Console MCP服务器已启动，SSE端点: http://{host}:{port}{sse_path}')
    else:
        logger.info('Chrome Console MCP服务器已启动 (stdio)')
    server.run(transport=args.transport)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        # 处理用户通过Ctrl+C中断程序的情况
        logger.info("用户中断了程序执行")
