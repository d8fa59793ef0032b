"""WSGI entrypoint used by Gunicorn."""
import logging
import os

from backend.app import create_app

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)

with app.app_context():
    from backend.models import Player, Turf
    print(f'PlayMate ready: players={Player.query.count()} turfs={Turf.query.count()}')
