"""Tests for configuration loading"""

import logging

from backend.config import Config, DEFAULT_PORT, DEFAULT_SSE_PATH
from chrome_console.service import create_service


def test_defaults(tmp_path):
    cfg = Config(config_path=tmp_path / "missing.yaml", environ={})

    assert cfg.get("server.port") == DEFAULT_PORT == 8000
    assert cfg.get("server.sse_path") == DEFAULT_SSE_PATH == "/mcp"
    assert cfg.get("cdp.host") == "127.0.0.1"
    assert cfg.get("cdp.port") == 9222
    assert cfg.get("cdp.auto_reconnect") is False
    assert cfg.get("console.max_entries") is None
    assert cfg.get("does.not.exist", "fallback") == "fallback"
    assert cfg.log_level == logging.INFO


def test_port_environment_variable(tmp_path):
    cfg = Config(config_path=tmp_path / "missing.yaml", environ={"PORT": "9100"})

    assert cfg.get("server.port") == 9100


def test_invalid_port_environment_variable_is_ignored(tmp_path):
    cfg = Config(config_path=tmp_path / "missing.yaml", environ={"PORT": "eighty"})

    assert cfg.get("server.port") == 8000


def test_yaml_overrides_are_merged(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "cdp:\n"
        "  port: 9333\n"
        "console:\n"
        "  max_entries: 100\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8"
    )

    cfg = Config(config_path=path, environ={})

    assert cfg.get("cdp.port") == 9333
    assert cfg.get("cdp.host") == "127.0.0.1"
    assert cfg.get("console.max_entries") == 100
    assert cfg.log_level == logging.DEBUG


def test_config_path_from_environment(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("server:\n  host: 0.0.0.0\n", encoding="utf-8")

    cfg = Config(environ={"CHROME_CONSOLE_CONFIG": str(path)})

    assert cfg.get("server.host") == "0.0.0.0"


def test_malformed_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("cdp: [unclosed\n", encoding="utf-8")

    cfg = Config(config_path=path, environ={})

    assert cfg.get("cdp.port") == 9222


def test_set_nested_key(tmp_path):
    cfg = Config(config_path=tmp_path / "missing.yaml", environ={})
    cfg.set("cdp.target_url", "http://localhost:3000")

    assert cfg.get("cdp.target_url") == "http://localhost:3000"


def test_create_service_uses_config(tmp_path, connector):
    cfg = Config(config_path=tmp_path / "missing.yaml", environ={})
    cfg.set("console.max_entries", 2)
    cfg.set("cdp.auto_reconnect", True)

    service = create_service(cfg, connector=connector)

    assert service.log_buffer.max_entries == 2
    assert service.session_manager.auto_reconnect is True
    assert service.dispatcher.log_buffer is service.log_buffer
    assert service.resources.log_buffer is service.log_buffer
