import asyncio
from pathlib import Path

import pytest

from backend.config import Config
from chrome_console.cdp.session_manager import CDPSessionManager
from chrome_console.console.log_buffer import ConsoleLogBuffer
from chrome_console.service import create_service
from chrome_console.tools.dispatcher import ToolDispatcher


def fake_evaluate(params):
    """模拟 Runtime.evaluate 对几个固定表达式的返回"""
    expression = params.get("expression", "")
    if expression == "1+1":
        return {"result": {"type": "number", "value": 2, "description": "2"}}
    if expression == "undefined":
        return {"result": {"type": "undefined"}}
    if expression == "null":
        return {"result": {"type": "object", "subtype": "null", "value": None}}
    if expression == "NaN":
        return {"result": {"type": "number", "unserializableValue": "NaN", "description": "NaN"}}
    if expression == "({a: '中文', b: [1, 2]})":
        return {"result": {"type": "object", "value": {"a": "中文", "b": [1, 2]}}}
    if expression.startswith("throw"):
        return {
            "result": {"type": "object", "subtype": "error", "className": "Error"},
            "exceptionDetails": {
                "exceptionId": 1,
                "text": "Uncaught",
                "lineNumber": 0,
                "columnNumber": 0,
                "exception": {
                    "type": "object",
                    "subtype": "error",
                    "className": "Error",
                    "description": "Error: x\n    at <anonymous>:1:7"
                }
            }
        }
    return {"result": {"type": "string", "value": expression}}


class FakeCDPClient:
    """不依赖浏览器的 CDP 客户端"""

    def __init__(self):
        self.sent = []
        self.handlers = {}
        self.disconnect_callbacks = []
        self.disconnected = False
        self.responses = {"Runtime.evaluate": fake_evaluate}

    async def send(self, method, params=None):
        params = params or {}
        self.sent.append((method, params))
        await asyncio.sleep(0)
        response = self.responses.get(method, {})
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def on_disconnect(self, callback):
        self.disconnect_callbacks.append(callback)

    async def disconnect(self):
        self.disconnected = True
        for callback in list(self.disconnect_callbacks):
            callback()

    def emit(self, event, params):
        for handler in self.handlers.get(event, []):
            handler(params)

    def drop(self):
        """模拟浏览器连接意外断开"""
        for callback in list(self.disconnect_callbacks):
            callback()

    def methods(self):
        return [method for method, _ in self.sent]


class FakeConnector:
    """记录连接次数的连接函数，前 fail_times 次连接失败"""

    def __init__(self, fail_times=0, delay=0.01):
        self.fail_times = fail_times
        self.delay = delay
        self.calls = 0
        self.clients = []

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.calls <= self.fail_times:
            raise OSError("connect ECONNREFUSED 127.0.0.1:9222")
        client = FakeCDPClient()
        self.clients.append(client)
        return client

    @property
    def client(self):
        return self.clients[-1]


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def log_buffer():
    return ConsoleLogBuffer()


@pytest.fixture
def session_manager(log_buffer, connector):
    return CDPSessionManager(log_buffer, connector)


@pytest.fixture
def dispatcher(session_manager, log_buffer):
    return ToolDispatcher(session_manager, log_buffer)


@pytest.fixture
def app_config(tmp_path: Path):
    return Config(config_path=tmp_path / 'missing.yaml', environ={})


@pytest.fixture
def service(app_config, connector):
    return create_service(app_config, connector=connector)
