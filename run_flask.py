#!/usr/bin/env python3
"""
Flask 应用启动脚本
用于启动 Chrome Console 的 HTTP / WebSocket 桥接
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from backend.app import run_bridge
from backend.config import config
import logging

logging.basicConfig(
    level=config.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

if __name__ == '__main__':
    port = int(config.get('server.port', 8000))
    logger.info('='*60)
    logger.info('Chrome Console Bridge')
    logger.info('='*60)
    logger.info(f'访问地址: http://localhost:{port}/health')
    logger.info('Press Ctrl+C to stop the server')
    logger.info('='*60)

    run_bridge(port=port)
