import os

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_str(name, default=''):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return str(raw).strip()


def _normalize_database_url(raw_url):
    if not raw_url:
        return raw_url
    if raw_url.startswith('postgres://'):
        return raw_url.replace('postgres://', 'postgresql://', 1)
    return raw_url


DEFAULT_ADMIN_PASSWORD = 'admin123'


class BaseConfig:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-prod')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'threading')
    LOG_LEVEL = _env_str('LOG_LEVEL', 'INFO').upper()

    # 'memory' keeps tokens for the process lifetime, 'database' persists them.
    SESSION_STORE = _env_str('SESSION_STORE', 'memory').lower()

    SEED_DEFAULT_TURFS = _env_bool('SEED_DEFAULT_TURFS', True)
    SEED_ADMIN_ACCOUNT = _env_bool('SEED_ADMIN_ACCOUNT', True)
    ADMIN_NAME = _env_str('ADMIN_NAME', 'Admin')
    ADMIN_PHONE = _env_str('ADMIN_PHONE', '0000000000')
    ADMIN_PASSWORD = _env_str('ADMIN_PASSWORD', DEFAULT_ADMIN_PASSWORD)
    ADMIN_ZONE = _env_str('ADMIN_ZONE', 'Patia')


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(
        os.environ.get(
            'DATABASE_URL',
            'sqlite:///' + os.path.join(basedir, '..', 'playmate_dev.db')
        )
    )


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SESSION_STORE = 'memory'
    SEED_DEFAULT_TURFS = False
    SEED_ADMIN_ACCOUNT = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(os.environ.get('DATABASE_URL'))
    SESSION_STORE = _env_str('SESSION_STORE', 'database').lower()


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
