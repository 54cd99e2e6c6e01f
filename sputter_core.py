#!/usr/bin/env python3
"""
Sputter Core v0.1 - Ambient LED Animation Server

Four LED channels, each owned by a LedChannel service, plus the
AnimationEngine that takes them over while an ambient mode is selected.
A FramePump thread ticks the engine; a small REST API (and socket.io
notifications) selects modes and sets channel hue/brightness/power.

Environment:
    SPUTTER_HOST, SPUTTER_PORT      bind address (default 0.0.0.0:8892)
    SPUTTER_CORS_ORIGINS            extra allowed origins (comma-separated)
    SPUTTER_LOG_LEVEL               logging level (default INFO)
    SPUTTER_NUM_LEDS, SPUTTER_FRAME_MS, SPUTTER_PUMP_INTERVAL_MS,
    SPUTTER_STATE_FILE              see core.animation.config
"""

import logging
import os
import signal
import threading

from flask import Flask, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO

from core.animation import (
    AnimationConfig,
    AnimationEngine,
    FramePump,
    JsonModeStore,
    MemoryModeStore,
    StripBuffers,
    create_channels,
    __version__ as SPUTTER_VERSION,
)
from blueprints.animation_bp import animation_bp, init_app as animation_init

logger = logging.getLogger('sputter')

API_HOST = os.environ.get('SPUTTER_HOST', '0.0.0.0')
API_PORT = int(os.environ.get('SPUTTER_PORT', 8892))

# ============================================================
# CORS Configuration
# ============================================================
# Add custom origins via SPUTTER_CORS_ORIGINS environment variable (comma-separated)
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8892",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8892",
]


def get_allowed_origins():
    """Get list of allowed CORS origins from defaults + environment"""
    origins = DEFAULT_CORS_ORIGINS.copy()
    env_origins = os.environ.get('SPUTTER_CORS_ORIGINS', '')
    if env_origins:
        for origin in env_origins.split(','):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
    return origins


class SputterRuntime:
    """Everything the server wires together, kept for shutdown and tests."""

    def __init__(self, config, buffers, channels, engine, pump, lock):
        self.config = config
        self.buffers = buffers
        self.channels = channels
        self.engine = engine
        self.pump = pump
        self.lock = lock


def create_app(config=None, mode_store=None, output=None, start_pump=True):
    """
    Build the Flask app, socket.io server and animation runtime.

    Returns:
        (app, socketio, runtime)
    """
    config = config if config is not None else AnimationConfig.from_env()
    if mode_store is None:
        mode_store = JsonModeStore(config.state_file) if config.state_file else MemoryModeStore()

    app = Flask(__name__)
    origins = get_allowed_origins()
    logger.info(f"CORS allowed origins: {origins}")
    CORS(app, resources={r"/api/*": {"origins": origins}})
    socketio = SocketIO(app, cors_allowed_origins=origins, async_mode='threading')

    # Engine first (loads the saved mode), channel owners second
    buffers = StripBuffers(config.num_leds, config.num_channels)
    engine = AnimationEngine(buffers, mode_store, frame_ms=config.frame_ms)
    channels = create_channels(buffers, config.default_hues, config.default_brightness)
    for channel in channels:
        channel.paint()
    engine.set_channel_services(channels)

    lock = threading.Lock()
    pump = FramePump(engine, output=output, interval_ms=config.pump_interval_ms, lock=lock)

    animation_init(engine, channels, lock, socketio)
    app.register_blueprint(animation_bp)

    runtime = SputterRuntime(config, buffers, channels, engine, pump, lock)

    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({
            'status': 'healthy',
            'version': SPUTTER_VERSION,
            'mode': engine.get_mode_name(engine.get_current_mode()),
            'pump': pump.get_status(),
            'config': config.to_dict(),
        })

    if start_pump:
        pump.start()

    return app, socketio, runtime


def main():
    logging.basicConfig(
        level=os.environ.get('SPUTTER_LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app, socketio, runtime = create_app()

    print("\n" + "="*60)
    print(f"  Sputter Core v{SPUTTER_VERSION} - Ambient LED Animation Engine")
    print(f"  Channels: {runtime.config.num_channels} x {runtime.config.num_leds} pixels")
    print(f"  Mode:     {runtime.engine.get_mode_name(runtime.engine.get_current_mode())}")
    print(f"  State:    {runtime.config.state_file or '(memory only)'}")
    print(f"  API:      http://{API_HOST}:{API_PORT}")
    print("="*60 + "\n")

    def _graceful_shutdown(signum, frame):
        print("\nSIGTERM received - graceful shutdown...", flush=True)
        runtime.pump.stop()
        print("Shutdown complete", flush=True)
        os._exit(0)

    signal.signal(signal.SIGTERM, _graceful_shutdown)

    socketio.run(app, host=API_HOST, port=API_PORT, debug=False, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
