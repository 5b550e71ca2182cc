"""
异常定义
连接、传输与参数校验相关的错误类型
"""


class ChromeConsoleError(Exception):
    """所有自定义异常的基类"""


class BrowserConnectionError(ChromeConsoleError, ConnectionError):
    """无法连接或初始化浏览器的远程调试端点"""


class TransportError(BrowserConnectionError):
    """连接建立后与浏览器的通信中断"""


class ValidationError(ChromeConsoleError, ValueError):
    """工具参数不合法，在任何网络请求之前被拒绝"""


class CommandError(ChromeConsoleError):
    """浏览器返回的CDP协议错误，会话本身仍然可用"""
