"""
Sputter — Animation & Channel Blueprint
Routes: /api/animation/*, /api/channels/*
Dependencies: animation engine, channel list, engine lock, socketio (optional)
"""

import math

from flask import Blueprint, jsonify, request

from core.animation import ModeId, list_modes

animation_bp = Blueprint('animation', __name__)

# Dependencies injected at registration time
_engine = None
_channels = None
_lock = None
_socketio = None


def init_app(engine, channels, lock, socketio=None):
    """Initialize blueprint with required dependencies."""
    global _engine, _channels, _lock, _socketio
    _engine = engine
    _channels = channels
    _lock = lock
    _socketio = socketio


def _emit_update(status):
    if _socketio is not None:
        _socketio.emit('animation_update', status)


def _error(message, code=400):
    return jsonify({'success': False, 'error': message}), code


def _parse_mode(value):
    """Accept a mode id (int) or key ("triadic_rain"); None if unknown."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return ModeId(value)
        except ValueError:
            return None
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isdigit():
            return _parse_mode(int(key))
        return ModeId.__members__.get(key)
    return None


# ─────────────────────────────────────────────────────────
# Animation Routes
# ─────────────────────────────────────────────────────────

@animation_bp.route('/api/animation/status', methods=['GET'])
def animation_status():
    with _lock:
        return jsonify(_engine.get_status())

@animation_bp.route('/api/animation/modes', methods=['GET'])
def animation_modes():
    return jsonify(list_modes())

@animation_bp.route('/api/animation/mode', methods=['POST'])
def set_animation_mode():
    data = request.get_json(silent=True) or {}
    if 'mode' not in data:
        return _error("Missing 'mode'")
    mode = _parse_mode(data['mode'])
    if mode is None:
        return _error(f"Unknown mode: {data['mode']!r}")

    with _lock:
        _engine.set_mode(mode)
        status = _engine.get_status()
    _emit_update(status)
    return jsonify({'success': True, 'status': status})

@animation_bp.route('/api/animation/cycle', methods=['POST'])
def cycle_animation_mode():
    with _lock:
        _engine.cycle_mode()
        status = _engine.get_status()
    _emit_update(status)
    return jsonify({'success': True, 'status': status})

@animation_bp.route('/api/animation/storage', methods=['DELETE'])
def clear_animation_storage():
    """Forget the saved mode; the running animation is left alone."""
    with _lock:
        _engine.clear_storage()
    return jsonify({'success': True})


# ─────────────────────────────────────────────────────────
# Channel Routes
# ─────────────────────────────────────────────────────────

@animation_bp.route('/api/channels', methods=['GET'])
def get_channels():
    with _lock:
        return jsonify([channel.to_dict() for channel in _channels])

@animation_bp.route('/api/channels/<int:number>', methods=['GET'])
def get_channel(number):
    if number < 1 or number > len(_channels):
        return _error(f"Unknown channel: {number}", 404)
    with _lock:
        return jsonify(_channels[number - 1].to_dict())

@animation_bp.route('/api/channels/<int:number>', methods=['PUT', 'POST'])
def update_channel(number):
    if number < 1 or number > len(_channels):
        return _error(f"Unknown channel: {number}", 404)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error("Expected a JSON object")

    updates = {}
    for field in ('hue', 'saturation', 'brightness'):
        if field in data:
            value = data[field]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return _error(f"'{field}' must be a number")
            if isinstance(value, float) and not math.isfinite(value):
                return _error(f"'{field}' must be a number")
            updates[field] = int(value)
    if 'power' in data:
        if not isinstance(data['power'], bool):
            return _error("'power' must be true or false")
        updates['power'] = data['power']

    with _lock:
        state = _channels[number - 1].update(**updates)
        status = _engine.get_status()
    _emit_update(status)
    return jsonify({'success': True, 'channel': number, 'state': state.to_dict()})
