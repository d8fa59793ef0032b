import itertools

import pytest
from backend.app import create_app, db
from backend.session_store import DatabaseSessionStore, InMemorySessionStore

_phone_counter = itertools.count(1)


def next_phone():
    return f'98{next(_phone_counter):08d}'


def register_player(client, name='Test Player', zone='Patia', skill_level=5, **extra):
    """Register a player and return ``(headers, player)``."""
    payload = {
        'name': name, 'phone': extra.pop('phone', None) or next_phone(),
        'password': 'secret1', 'zone': zone, 'skill_level': skill_level,
    }
    payload.update(extra)
    res = client.post('/api/auth/register', json=payload)
    assert res.status_code == 201, res.get_json()
    data = res.get_json()
    return {'Authorization': f'Bearer {data["token"]}'}, data['player']


def login_admin(client):
    """Create an admin account directly and log in through the API."""
    from backend.models import Player
    from backend.auth_utils import hash_password

    admin = Player(
        name='Admin', phone='0000000000', password_hash=hash_password('admin123'),
        zone='Patia', skill_level=10, is_admin=True,
    )
    db.session.add(admin)
    db.session.commit()

    res = client.post('/api/auth/login', json={'phone': '0000000000', 'password': 'admin123'})
    token = res.get_json()['token']
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def app():
    app = create_app('testing', session_store=InMemorySessionStore())
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def fk_app():
    """Persisted tokens on a SQLite connection that enforces foreign keys."""
    app = create_app('testing', session_store=DatabaseSessionStore())
    with app.app_context():
        db.create_all()
        with db.engine.connect() as connection:
            connection.exec_driver_sql('PRAGMA foreign_keys=ON')
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fk_client(fk_app):
    return fk_app.test_client()


@pytest.fixture
def fk_register(fk_client):
    def _register(name='Test Player', zone='Patia', skill_level=5, **extra):
        return register_player(fk_client, name=name, zone=zone, skill_level=skill_level, **extra)
    return _register


@pytest.fixture
def fk_admin_headers(fk_app, fk_client):
    return login_admin(fk_client)


@pytest.fixture
def register(client):
    def _register(name='Test Player', zone='Patia', skill_level=5, **extra):
        return register_player(client, name=name, zone=zone, skill_level=skill_level, **extra)
    return _register


@pytest.fixture
def auth_headers(register):
    headers, _ = register()
    return headers


@pytest.fixture
def admin_headers(app, client):
    return login_admin(client)


@pytest.fixture
def sample_turf(app):
    """Create a sample turf for testing."""
    from backend.models import Turf
    turf = Turf(
        name='Test Turf', location='Patia', price_per_hour=1000,
        formats='5v5', emoji='⚽', description='Floodlit',
    )
    db.session.add(turf)
    db.session.commit()
    return turf
