"""
配置管理模块
负责加载和管理应用配置
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = 'CHROME_CONSOLE_CONFIG'
PORT_ENV = 'PORT'
DEFAULT_PORT = 8000
DEFAULT_SSE_PATH = '/mcp'


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """递归合并两个配置字典，override 优先"""
    merged = deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """配置管理类"""

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        初始化配置管理器

        Args:
            config_path: 配置文件路径，默认读取环境变量 CHROME_CONSOLE_CONFIG，
                         否则为项目根目录的 config.yaml
            environ: 环境变量，默认为 os.environ
        """
        self.environ = os.environ if environ is None else environ
        if config_path is None:
            config_path = self.environ.get(CONFIG_PATH_ENV) or Path(__file__).parent.parent / 'config.yaml'

        self.config_path = Path(config_path)
        self.config: Dict[str, Any] = {}

        self.load_config()

    def load_config(self) -> None:
        """从 YAML 文件加载配置，并合并到默认配置之上"""
        loaded: Dict[str, Any] = {}
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    loaded = yaml.safe_load(f) or {}
                logger.info(f'Configuration loaded from {self.config_path}')
            else:
                logger.debug(f'Configuration file not found, using defaults: {self.config_path}')
        except (OSError, yaml.YAMLError) as e:
            logger.error(f'Failed to load configuration: {e}')
            loaded = {}

        if not isinstance(loaded, dict):
            logger.error(f'Configuration root must be a mapping: {self.config_path}')
            loaded = {}

        self.config = _merge(self.get_default_config(), loaded)
        self.apply_environment()

    def apply_environment(self) -> None:
        """环境变量 PORT 覆盖监听端口"""
        raw_port = (self.environ.get(PORT_ENV) or '').strip()
        if not raw_port:
            return
        try:
            self.set('server.port', int(raw_port))
        except ValueError:
            logger.warning(f'Ignoring invalid {PORT_ENV} value: {raw_port!r}')

    @staticmethod
    def get_default_config() -> Dict[str, Any]:
        """返回默认配置"""
        return {
            'server': {
                'host': '127.0.0.1',
                'port': DEFAULT_PORT,
                'sse_path': DEFAULT_SSE_PATH,
                'request_timeout': None  # HTTP 桥接等待工具结果的秒数，None 表示一直等待
            },
            'cdp': {
                'host': '127.0.0.1',
                'port': 9222,
                'ws_endpoint': None,
                'target_url': None,  # 优先附着的页面URL前缀
                'auto_reconnect': False
            },
            'console': {
                'max_entries': None  # None 表示不限制日志条数
            },
            'logging': {
                'level': 'INFO'
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        获取配置值（支持点分隔的嵌套键）

        Args:
            key: 配置键，如 'cdp.port'
            default: 默认值

        Returns:
            配置值
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        设置配置值（支持点分隔的嵌套键）

        Args:
            key: 配置键，如 'server.port'
            value: 配置值
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    @property
    def log_level(self) -> int:
        """logging 模块使用的日志级别"""
        level = str(self.get('logging.level', 'INFO')).upper()
        return getattr(logging, level, logging.INFO)

config = Config()
