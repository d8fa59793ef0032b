#!/usr/bin/env python3
"""Entry point for the PlayMate application."""
import logging
import os
from backend.app import create_app, socketio

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 3000))
    print(f"⚽ PlayMate starting on http://localhost:{port}")
    print(f"⚽ API available at http://localhost:{port}/api")
    socketio.run(
        app, host='0.0.0.0', port=port,
        debug=(config_name == 'development'),
        allow_unsafe_werkzeug=True,
    )
