"""
RESTful API 路由
以 HTTP 形式提供工具调用、资源读取与会话管理接口
"""

from flask import Blueprint, request, jsonify, current_app
import logging

from backend.config import config
from chrome_console.errors import ValidationError
from chrome_console.tools import TOOL_DEFINITIONS, CONSOLE_LOGS_URI, CONSOLE_LOGS_NAME

logger = logging.getLogger(__name__)

bp = Blueprint('api', __name__)


def _service():
    return current_app.extensions['console_service']


def _run(coro):
    """在后台事件循环中执行协程"""
    runtime = current_app.extensions['loop_runtime']
    return runtime.run(coro, timeout=config.get('server.request_timeout'))


@bp.route('/tools', methods=['GET'])
def list_tools():
    """列出所有工具"""
    return jsonify({
        'success': True,
        'data': [
            {'name': name, **definition}
            for name, definition in TOOL_DEFINITIONS.items()
        ]
    })


@bp.route('/tools/<name>', methods=['POST'])
def call_tool(name):
    """调用工具

    工具自身的失败（连接、执行、校验错误）以普通响应返回，HTTP 状态码仍为 200。
    """
    if name not in TOOL_DEFINITIONS:
        return jsonify({
            'success': False,
            'error': f'Unknown tool: {name}'
        }), 404

    arguments = request.get_json(silent=True)
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        return jsonify({
            'success': False,
            'error': 'Request body must be a JSON object'
        }), 400

    try:
        response = _run(_service().dispatcher.call(name, arguments))
    except Exception as e:
        logger.error(f'Failed to call tool {name}: {e}')
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500

    return jsonify({
        'success': True,
        'data': response.to_dict()
    })


@bp.route('/resources', methods=['GET'])
def list_resources():
    """列出所有资源"""
    return jsonify({
        'success': True,
        'data': [{
            'uri': CONSOLE_LOGS_URI,
            'name': CONSOLE_LOGS_NAME,
            'mimeType': 'text/plain'
        }]
    })


@bp.route('/resources/console-logs', methods=['GET'])
def read_console_logs():
    """读取控制台日志资源（不会建立浏览器会话）"""
    uri = request.args.get('uri', CONSOLE_LOGS_URI)
    try:
        contents = _service().resources.read(uri)
    except ValidationError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 404

    return jsonify({
        'success': True,
        'data': {'contents': [contents.to_dict()]}
    })


@bp.route('/session', methods=['GET'])
def get_session():
    """获取会话状态"""
    manager = _service().session_manager
    return jsonify({
        'success': True,
        'data': {
            'state': manager.state.value,
            'enabled_domains': sorted(manager.enabled_domains),
            'connect_attempts': manager.connect_attempts,
            'auto_reconnect': manager.auto_reconnect
        }
    })


@bp.route('/session/reset', methods=['POST'])
def reset_session():
    """丢弃当前会话，下一次工具调用时重新连接"""
    manager = _service().session_manager
    try:
        _run(manager.reset())
    except Exception as e:
        logger.error(f'Failed to reset session: {e}')
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500

    logger.info('Session reset via API')
    return jsonify({
        'success': True,
        'data': {'state': manager.state.value}
    })
