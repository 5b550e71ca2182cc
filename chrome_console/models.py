"""
数据模型
会话状态、脚本执行结果与工具响应的统一结构
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SessionState(Enum):
    """CDP 会话状态枚举"""
    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    READY = "ready"
    DISCONNECTED = "disconnected"


class ErrorKind(Enum):
    """工具失败类型"""
    CONNECTION = "connection"
    TRANSPORT = "transport"
    VALIDATION = "validation"
    EVALUATION = "evaluation"
    INTERNAL = "internal"


@dataclass
class EvaluationResult:
    """Runtime.evaluate 的执行结果

    exception_text 与值描述两者只会出现其一。
    """
    exception_text: Optional[str] = None
    value_type: Optional[str] = None
    value: Any = None
    has_value: bool = False
    unserializable_value: Optional[str] = None

    @classmethod
    def from_cdp(cls, response: Dict[str, Any]) -> 'EvaluationResult':
        """从 CDP 返回的字典创建结果对象"""
        details = response.get('exceptionDetails')
        if details:
            exception = details.get('exception') or {}
            text = exception.get('description') or details.get('text') or 'Uncaught'
            return cls(exception_text=text)

        remote = response.get('result') or {}
        return cls(
            value_type=remote.get('type', 'undefined'),
            value=remote.get('value'),
            has_value='value' in remote,
            unserializable_value=remote.get('unserializableValue')
        )

    @property
    def is_exception(self) -> bool:
        return self.exception_text is not None

    @property
    def is_undefined(self) -> bool:
        return not self.is_exception and self.value_type == 'undefined'


@dataclass
class TextContent:
    """文本内容块"""
    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'text': self.text}


@dataclass
class ToolResponse:
    """工具调用的统一响应

    无论成功还是失败，调用方都会拿到同样结构的内容块列表；
    is_error / error_kind 仅用于区分结果类型。
    """
    content: List[TextContent] = field(default_factory=list)
    is_error: bool = False
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, text: str) -> 'ToolResponse':
        return cls(content=[TextContent(text=text)])

    @classmethod
    def failure(cls, text: str, kind: ErrorKind) -> 'ToolResponse':
        return cls(content=[TextContent(text=text)], is_error=True, error_kind=kind)

    @property
    def text(self) -> str:
        """所有内容块拼接后的文本"""
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典（用于JSON序列化）"""
        result = {'content': [block.to_dict() for block in self.content]}
        if self.is_error:
            result['isError'] = True
            result['errorKind'] = self.error_kind.value if self.error_kind else None
        return result


@dataclass
class ResourceContents:
    """资源读取结果"""
    uri: str
    text: str
    mime_type: str = "text/plain"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'uri': self.uri,
            'mimeType': self.mime_type,
            'text': self.text
        }
