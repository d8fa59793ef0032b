import os
from flask import Flask, send_from_directory, request, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO
from flask_cors import CORS
from sqlalchemy import inspect, text
from werkzeug.exceptions import HTTPException
from werkzeug.routing import PathConverter
from backend.config import config, DEFAULT_ADMIN_PASSWORD

db = SQLAlchemy()
socketio = SocketIO()

FRONTEND_DIR = os.path.join(os.path.dirname(__file__), '..', 'frontend')


class FrontendPathConverter(PathConverter):
    """Like ``path`` but never matches anything under ``api/``."""
    regex = r'(?!api(?:/|$))[^/].*?'


def _parse_allowed_origins(raw_origins):
    if not raw_origins:
        return '*'

    if isinstance(raw_origins, (list, tuple, set)):
        cleaned = [origin for origin in raw_origins if origin]
        return cleaned or '*'

    raw_text = str(raw_origins).strip()
    if not raw_text or raw_text == '*':
        return '*'

    origins = [origin.strip() for origin in raw_text.split(',') if origin.strip()]
    return origins or '*'


def _run_lightweight_migrations():
    """Apply small schema updates for local/dev databases without Alembic."""
    inspector = inspect(db.engine)
    table_names = inspector.get_table_names()
    if 'player' not in table_names:
        return

    player_columns = {col['name'] for col in inspector.get_columns('player')}
    with db.engine.begin() as connection:
        if 'avatar_url' not in player_columns:
            connection.execute(text(
                "ALTER TABLE player ADD COLUMN avatar_url VARCHAR(500) DEFAULT ''"
            ))


def _seed_defaults(app):
    from backend.services.seeder import seed_admin, seed_turfs

    if app.config.get('SEED_DEFAULT_TURFS'):
        count = seed_turfs()
        if count:
            app.logger.info('Seeded %s default turfs', count)

    if app.config.get('SEED_ADMIN_ACCOUNT'):
        password = str(app.config.get('ADMIN_PASSWORD') or '')
        if app.config.get('ENV_NAME') == 'production' and password in ('', DEFAULT_ADMIN_PASSWORD):
            app.logger.warning('Admin seed skipped: ADMIN_PASSWORD must be set in production')
            return
        created = seed_admin(
            name=app.config.get('ADMIN_NAME', 'Admin'),
            phone=app.config.get('ADMIN_PHONE', '0000000000'),
            password=password,
            zone=app.config.get('ADMIN_ZONE', ''),
        )
        if created:
            app.logger.info('Seeded admin account (phone: %s)', app.config.get('ADMIN_PHONE'))


def _register_error_handlers(app):
    from backend.errors import ServiceError

    @app.errorhandler(ServiceError)
    def _handle_service_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc):
        if not request.path.startswith('/api/'):
            return exc
        return jsonify({'error': exc.description}), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected_error(exc):
        db.session.rollback()
        app.logger.exception('Unhandled error on %s %s', request.method, request.path)
        return jsonify({'error': 'Internal server error'}), 500


def create_app(config_name='development', session_store=None):
    app = Flask(__name__)
    app.url_map.converters['frontend_path'] = FrontendPathConverter
    app.config.from_object(config[config_name])
    app.config['ENV_NAME'] = str(config_name).strip().lower()
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _parse_allowed_origins(app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    if app.config['ENV_NAME'] == 'production' and allowed_origins == '*':
        raise RuntimeError('CORS_ALLOWED_ORIGINS must be explicitly set in production')

    db.init_app(app)
    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading'),
    )
    CORS(app, resources={r'/api/*': {'origins': allowed_origins}})

    from backend.session_store import build_session_store
    app.extensions['session_store'] = session_store or build_session_store(
        app.config.get('SESSION_STORE'),
    )

    @app.before_request
    def _enforce_origin_for_mutating_api_requests():
        if request.method in {'GET', 'HEAD', 'OPTIONS'}:
            return None
        if not request.path.startswith('/api/'):
            return None

        origin = str(request.headers.get('Origin') or '').strip()
        if not origin:
            return None

        configured_origins = _parse_allowed_origins(
            app.config.get('CORS_ALLOWED_ORIGINS', '*')
        )
        if configured_origins != '*' and origin not in configured_origins:
            return jsonify({'error': 'Invalid request origin'}), 403
        return None

    _register_error_handlers(app)

    from backend.routes.auth import auth_bp
    from backend.routes.players import players_bp
    from backend.routes.turfs import turfs_bp
    from backend.routes.bookings import bookings_bp
    from backend.routes.connections import connections_bp
    from backend.routes.events import events_bp
    from backend.routes.chat import chat_bp
    from backend.routes.admin import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(players_bp, url_prefix='/api/players')
    app.register_blueprint(turfs_bp, url_prefix='/api/turfs')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(connections_bp, url_prefix='/api/connections')
    app.register_blueprint(events_bp, url_prefix='/api/events')
    app.register_blueprint(chat_bp, url_prefix='/api/chat')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.route('/api/health')
    def health():
        from backend.time_utils import utcnow_naive
        return jsonify({'status': 'ok', 'timestamp': utcnow_naive().isoformat() + 'Z'})

    @app.route('/')
    def index():
        return send_from_directory(FRONTEND_DIR, 'index.html')

    @app.route('/<frontend_path:filename>')
    def frontend_files(filename):
        return send_from_directory(FRONTEND_DIR, filename)

    with app.app_context():
        from backend import models  # noqa: F401
        db.create_all()
        _run_lightweight_migrations()
        _seed_defaults(app)

    return app
