"""Tests for URL validation and value formatting helpers"""

import asyncio

import pytest

from chrome_console.errors import ValidationError
from chrome_console.utils import format_remote_value, measure_time, url_matches, validate_url


@pytest.mark.parametrize("url", [
    "http://example.com",
    "https://example.com/path?q=1#frag",
    "http://localhost:8080",
    "about:blank",
    "file:///tmp/index.html",
    "data:text/html,<h1>hi</h1>",
])
def test_validate_url_accepts(url):
    assert validate_url(url) == url


@pytest.mark.parametrize("url", [
    "not-a-url",
    "",
    "   ",
    "example.com",
    "http://",
    "http://exa mple.com",
    "http://[::1",
    None,
    123,
])
def test_validate_url_rejects(url):
    with pytest.raises(ValidationError):
        validate_url(url)


def test_validate_url_strips_whitespace():
    assert validate_url("  http://example.com  ") == "http://example.com"


def test_format_remote_value():
    assert format_remote_value("number", 2, True) == "结果 (number): 2"
    assert format_remote_value("boolean", False, True) == "结果 (boolean): false"
    assert format_remote_value("object", None, True) == "结果 (object): null"
    assert format_remote_value("function", None, False) == "结果 (function): null"
    assert format_remote_value("bigint", None, False, "10n") == "结果 (bigint): 10n"


def test_url_matches():
    assert url_matches("https://example.com/app/page", "http://example.com/app")
    assert url_matches("https://example.com/", "example.com/")
    assert not url_matches("https://other.com/", "example.com")
    assert not url_matches("", "example.com")


def test_measure_time_preserves_results():
    @measure_time
    def add(a, b):
        return a + b

    @measure_time
    async def mul(a, b):
        return a * b

    assert add(1, 2) == 3
    assert asyncio.run(mul(2, 3)) == 6
    assert add.__name__ == "add"
