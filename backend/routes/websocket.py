"""
WebSocket 路由
实时推送控制台日志
"""

from flask_socketio import emit
import logging
import time

logger = logging.getLogger(__name__)


def init_websocket(socketio, service):
    """初始化 WebSocket 事件处理器，并把新日志广播给所有客户端"""

    def broadcast_console_log(entry: str):
        socketio.emit('console_log', {'entry': entry})

    service.log_buffer.subscribe(broadcast_console_log)

    @socketio.on('connect')
    def handle_connect():
        """客户端连接"""
        logger.info('Client connected')
        emit('session_status', {
            'state': service.session_manager.state.value,
            'logs': len(service.log_buffer)
        })

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """客户端断开连接"""
        logger.info('Client disconnected')

    @socketio.on('get_console_logs')
    def handle_get_console_logs():
        """返回当前全部日志（只读，不建立会话）"""
        emit('console_logs', {'entries': service.log_buffer.read_all()})

    @socketio.on('ping')
    def handle_ping():
        """心跳检测"""
        emit('pong', {'timestamp': time.time()})
