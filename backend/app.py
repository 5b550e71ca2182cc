"""
Flask 应用主入口
Chrome Console HTTP / WebSocket 桥接
"""

from flask import Flask, jsonify
from flask_socketio import SocketIO
from flask_cors import CORS
import logging

from backend.config import config
from backend.runtime import LoopRuntime
from chrome_console import __version__
from chrome_console.service import ConsoleService, get_service

logger = logging.getLogger(__name__)


class _SilentEndpointFilter(logging.Filter):
    """过滤无需输出到终端的请求日志"""

    def __init__(self, silent_patterns=None):
        super().__init__()
        self.silent_patterns = silent_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if not message:
            return True
        return not any(pattern in message for pattern in self.silent_patterns)


def create_app(service: ConsoleService = None, runtime: LoopRuntime = None):
    """应用工厂函数

    Args:
        service: 进程级服务对象，默认使用全局单例
        runtime: 执行协程的后台事件循环，默认新建

    Returns:
        tuple: (app, socketio)
    """
    service = service or get_service()
    runtime = runtime or LoopRuntime()

    app = Flask(__name__)
    app.json.ensure_ascii = False  # 支持中文 JSON
    app.extensions['console_service'] = service
    app.extensions['loop_runtime'] = runtime

    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

    werkzeug_logger = logging.getLogger('werkzeug')
    werkzeug_logger.addFilter(_SilentEndpointFilter(['/health']))

    from backend.routes import api
    from backend.routes.websocket import init_websocket

    app.register_blueprint(api.bp, url_prefix='/api')
    init_websocket(socketio, service)

    @app.route('/health')
    def health_check():
        """健康检查接口"""
        return jsonify({
            'status': 'healthy',
            'version': __version__,
            'session': service.session_manager.state.value,
            'logs': len(service.log_buffer)
        })

    @app.errorhandler(404)
    def not_found(error):
        """404 错误处理"""
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(500)
    def internal_error(error):
        """500 错误处理"""
        logger.error(f'Internal Server Error: {error}')
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred'
        }), 500

    runtime.start()
    return app, socketio


def run_bridge(host: str = None, port: int = None):
    """启动 HTTP / WebSocket 桥接服务"""
    host = host or config.get('server.host', '127.0.0.1')
    port = port or int(config.get('server.port', 8000))
    app, socketio = create_app()
    logger.info(f'Chrome Console bridge listening on http://{host}:{port}')
    socketio.run(app,
                 host=host,
                 port=port,
                 debug=False,
                 use_reloader=False,
                 log_output=True,
                 allow_unsafe_werkzeug=True)
