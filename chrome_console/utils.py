import time
import functools
import asyncio
import json
import logging
from typing import Any, Optional
from urllib.parse import urlparse

from chrome_console.errors import ValidationError

logger = logging.getLogger(__name__)

# 这些协议的 URL 没有 netloc 也是合法的导航目标
_OPAQUE_SCHEMES = {'about', 'data', 'file'}


def validate_url(url: Any) -> str:
    """校验导航目标是否为格式正确的 URL

    Args:
        url: 待校验的地址

    Returns:
        str: 去除首尾空白后的 URL

    Raises:
        ValidationError: URL 为空、缺少协议或缺少主机名时抛出
    """
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL 不能为空")
    url = url.strip()
    if any(ch.isspace() for ch in url):
        raise ValidationError(f"无效的URL: {url}")

    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValidationError(f"无效的URL: {url} ({e})") from e
    scheme = parsed.scheme.lower()
    if not scheme:
        raise ValidationError(f"无效的URL: {url}")
    if scheme in _OPAQUE_SCHEMES:
        if not (parsed.path or parsed.netloc):
            raise ValidationError(f"无效的URL: {url}")
        return url
    if not parsed.netloc:
        raise ValidationError(f"无效的URL: {url}")
    return url


def normalize_url_for_match(value: Optional[str]) -> str:
    if not value:
        return ''
    value = value.strip()
    if not value:
        return ''
    parsed = urlparse(value)
    if parsed.scheme:
        netloc = parsed.netloc or ''
        path = parsed.path or ''
        return f"{netloc}{path}"
    return value


def url_matches(page_url: str, target_url: str) -> bool:
    """判断页面地址是否匹配目标地址（忽略协议与查询参数，支持前缀匹配）"""
    normalized_page = normalize_url_for_match(page_url)
    normalized_target = normalize_url_for_match(target_url)
    if not normalized_page or not normalized_target:
        return False
    return normalized_page == normalized_target or normalized_page.startswith(normalized_target)


def format_remote_value(value_type: str, value: Any, has_value: bool,
                        unserializable_value: Optional[str] = None) -> str:
    """将 Runtime.evaluate 的返回值格式化为 `结果 (<type>): <json>`

    NaN、Infinity、-0 与 BigInt 无法用 JSON 表示，CDP 通过 unserializableValue 返回其字面量。
    """
    if unserializable_value is not None:
        rendered = unserializable_value
    elif has_value:
        rendered = json.dumps(value, ensure_ascii=False)
    else:
        rendered = "null"
    return f"结果 ({value_type}): {rendered}"


def measure_time(func):
    """
    装饰器：记录同步或异步函数的执行时间（DEBUG 级别日志）
    """
    if asyncio.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                logger.debug(f"{func.__qualname__} took {elapsed:.6f}s")
        return async_wrapper
    else:
        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                logger.debug(f"{func.__qualname__} took {elapsed:.6f}s")
        return sync_wrapper
