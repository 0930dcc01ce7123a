"""
SentiLight Web Application

Flask-based HTTP interface using the MoodController library.
"""

import os
import sys
from pathlib import Path

# Add parent directories to path for imports
ROOT_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT_DIR))

# Load .env file from root directory
from dotenv import load_dotenv
load_dotenv(ROOT_DIR / '.env')

from flask import Flask, request, jsonify
from sentilight import (
    MoodController,
    ControllerConfig,
    DeviceRegistry,
    EventLogger,
    get_preset,
    PRESETS,
)
from sentilight.core.config import load_config


DEFAULT_CONFIG_PATH = Path(__file__).parent / 'config.yaml'


def build_controller(config: dict) -> MoodController:
    """Create the registry, logger and controller from a loaded config."""
    storage_dir = config.get('storage', {}).get('dir', 'data/storage')
    log_config = config.get('logging', {})

    controller_config = ControllerConfig.from_dict(config)
    registry = DeviceRegistry(
        storage_dir=storage_dir,
        verbose=controller_config.verbose,
    )
    event_logger = None
    if log_config.get('enabled', True):
        event_logger = EventLogger(log_dir=log_config.get('log_dir', 'data/logs'))

    return MoodController(controller_config, registry, event_logger=event_logger)


def create_app(config_path: str = None, controller: MoodController = None) -> Flask:
    """Create and configure the Flask application."""
    config = load_config(config_path or DEFAULT_CONFIG_PATH)
    request_timeout = float(config.get('web', {}).get('request_timeout', 60))

    env_key = os.environ.get('GEMINI_API_KEY', '')
    print(f"[env] .env path={ROOT_DIR / '.env'} exists={os.path.exists(ROOT_DIR / '.env')}")
    print(f"[env] GEMINI_API_KEY loaded={bool(env_key)} length={len(env_key)}")

    if controller is None:
        controller = build_controller(config)
    registry = controller.registry

    app = Flask(__name__)
    app.config['controller'] = controller

    # ─────────────────────────────────────────────────────────────
    # Routes
    # ─────────────────────────────────────────────────────────────

    @app.route('/')
    def index():
        """Service summary."""
        return jsonify({
            'success': True,
            'service': 'sentilight',
            'devices': registry.count(),
            'model': controller.config.model,
        })

    @app.route('/api/mood', methods=['POST'])
    def mood():
        """Turn mood text into a light command and send it."""
        data = request.get_json(silent=True) or {}
        text = (data.get('text') or '').strip()

        if not text:
            return jsonify({'success': False, 'error': 'No text provided'}), 400

        try:
            result = controller.process(text).result(timeout=request_timeout)
        except Exception as e:
            return jsonify({'success': False, 'error': str(e)}), 500

        if not result.success:
            return jsonify({**result.to_dict(), 'message': result.message}), 502
        return jsonify(result.to_dict())

    @app.route('/api/preset', methods=['POST'])
    def preset():
        """Send a preset scene, by name or by explicit values."""
        data = request.get_json(silent=True) or {}

        if data.get('name'):
            values = get_preset(data['name'])
            if values is None:
                return jsonify({'success': False, 'error': f"Unknown preset: {data['name']}"}), 404
        else:
            values = data

        hsbcolor = values.get('hsbcolor')
        if not hsbcolor:
            return jsonify({'success': False, 'error': 'hsbcolor required'}), 400

        try:
            dimmer = int(values.get('dimmer', 100))
            ct = int(values.get('ct', 250))
        except (TypeError, ValueError):
            return jsonify({'success': False, 'error': 'dimmer and ct must be integers'}), 400

        try:
            result = controller.send_preset(hsbcolor, dimmer, ct).result(timeout=request_timeout)
        except Exception as e:
            return jsonify({'success': False, 'error': str(e)}), 500

        if not result.success:
            return jsonify(result.to_dict()), 409
        return jsonify(result.to_dict())

    @app.route('/api/presets', methods=['GET'])
    def list_presets():
        return jsonify({'success': True, 'presets': PRESETS})

    @app.route('/api/devices', methods=['GET'])
    def list_devices():
        ips = registry.list()
        return jsonify({'success': True, 'ips': list(ips), 'count': len(ips)})

    @app.route('/api/devices', methods=['POST'])
    def add_device():
        data = request.get_json(silent=True) or {}
        ip = data.get('ip')
        if not isinstance(ip, str):
            ip = ''
        ip = ip.strip()

        if not ip:
            return jsonify({'success': False, 'error': 'Please enter an IP address.'}), 400
        if not registry.add(ip):
            return jsonify({'success': False, 'error': 'IP address is invalid or already registered.'}), 400
        return jsonify({'success': True, 'ips': list(registry.list())}), 201

    @app.route('/api/devices', methods=['PUT'])
    def replace_devices():
        data = request.get_json(silent=True) or {}
        ips = data.get('ips')
        if not isinstance(ips, list):
            return jsonify({'success': False, 'error': 'ips must be a list'}), 400

        registry.replace_all(ips)
        return jsonify({'success': True, 'ips': list(registry.list())})

    @app.route('/api/devices/<ip>', methods=['DELETE'])
    def remove_device(ip):
        if not registry.remove(ip):
            return jsonify({'success': False, 'error': f'{ip} is not registered'}), 404
        return jsonify({'success': True, 'ips': list(registry.list())})

    @app.route('/api/config', methods=['GET'])
    def get_config():
        """Get controller config (never the API key itself)."""
        return jsonify({'success': True, 'config': controller.config.to_public_dict()})

    @app.route('/api/config', methods=['POST'])
    def update_config():
        """Change the model and/or API key at runtime."""
        data = request.get_json(silent=True) or {}
        changes = {k: data[k] for k in ('model', 'api_key') if isinstance(data.get(k), str)}

        if not changes:
            return jsonify({'success': False, 'error': 'Nothing to update (model, api_key)'}), 400

        new_config = controller.reconfigure(**changes)
        return jsonify({'success': True, 'config': new_config.to_public_dict()})

    @app.route('/api/history', methods=['GET'])
    def get_history():
        """Recent mood and preset events."""
        if controller.event_logger is None:
            return jsonify({'success': True, 'events': []})

        try:
            limit = int(request.args.get('limit', 20))
        except ValueError:
            limit = 20
        events = controller.event_logger.read_events(limit=limit)
        return jsonify({'success': True, 'events': events})

    return app


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='SentiLight Web Server')
    parser.add_argument('--config', '-c', help='Path to config file')
    parser.add_argument('--port', '-p', type=int, default=3000, help='Port to listen on')
    parser.add_argument('--host', default='0.0.0.0', help='Host to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    args = parser.parse_args()

    app = create_app(args.config)

    print("=" * 60)
    print("SentiLight Web Server")
    print("=" * 60)
    print(f"Running on http://{args.host}:{args.port}")
    print("=" * 60)

    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == '__main__':
    main()
