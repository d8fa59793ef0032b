"""Tests for app startup helpers, origin handling and error shapes."""
import json

import pytest
from sqlalchemy import inspect
from backend.app import _parse_allowed_origins, create_app, db
from backend.config import ProductionConfig, TestingConfig
from backend.models import Player, Turf
from backend.session_store import DatabaseSessionStore, InMemorySessionStore


def test_parse_allowed_origins():
    assert _parse_allowed_origins(None) == '*'
    assert _parse_allowed_origins(' * ') == '*'
    assert _parse_allowed_origins('https://a.example, https://b.example,') == [
        'https://a.example', 'https://b.example',
    ]
    assert _parse_allowed_origins(['https://a.example', '']) == ['https://a.example']
    assert _parse_allowed_origins([]) == '*'


def test_production_requires_explicit_cors(monkeypatch):
    monkeypatch.setattr(ProductionConfig, 'CORS_ALLOWED_ORIGINS', '*')
    with pytest.raises(RuntimeError):
        create_app('production')


def test_testing_app_uses_injected_store(app):
    assert isinstance(app.extensions['session_store'], InMemorySessionStore)


def test_session_store_built_from_config(monkeypatch):
    monkeypatch.setattr(TestingConfig, 'SESSION_STORE', 'database')
    app = create_app('testing')
    assert isinstance(app.extensions['session_store'], DatabaseSessionStore)


def test_unknown_session_store_backend(monkeypatch):
    monkeypatch.setattr(TestingConfig, 'SESSION_STORE', 'redis')
    with pytest.raises(RuntimeError):
        create_app('testing')


def test_startup_seeds_turfs_and_admin(monkeypatch):
    monkeypatch.setattr(TestingConfig, 'SEED_DEFAULT_TURFS', True)
    monkeypatch.setattr(TestingConfig, 'SEED_ADMIN_ACCOUNT', True)
    app = create_app('testing')
    with app.app_context():
        assert Turf.query.count() == 3
        admin = Player.query.filter_by(is_admin=True).one()
        assert admin.phone == '0000000000'

    client = app.test_client()
    res = client.post('/api/auth/login', json={'phone': '0000000000', 'password': 'admin123'})
    assert res.status_code == 200
    assert json.loads(res.data)['player']['is_admin'] is True
    with app.app_context():
        db.drop_all()


def test_unknown_api_path_returns_json_404(client):
    res = client.get('/api/nothing-here')
    assert res.status_code == 404
    assert 'error' in json.loads(res.data)


def test_wrong_method_returns_json_405(client):
    res = client.patch('/api/turfs')
    assert res.status_code == 405
    assert 'error' in json.loads(res.data)


def test_mutating_request_from_foreign_origin_rejected(app, client):
    app.config['CORS_ALLOWED_ORIGINS'] = 'https://playmate.example'
    payload = {'phone': '9999999999', 'password': 'whatever'}

    res = client.post('/api/auth/login', json=payload, headers={'Origin': 'https://evil.example'})
    assert res.status_code == 403
    assert json.loads(res.data)['error'] == 'Invalid request origin'

    res = client.post('/api/auth/login', json=payload, headers={'Origin': 'https://playmate.example'})
    assert res.status_code == 401

    # Reads are never origin-checked.
    res = client.get('/api/turfs', headers={'Origin': 'https://evil.example'})
    assert res.status_code == 200


def test_unknown_api_path_is_404_for_every_method(client):
    for method in ('get', 'post', 'put', 'delete'):
        res = getattr(client, method)('/api/nothing-here')
        assert res.status_code == 404, method
        assert 'error' in json.loads(res.data)


def test_model_indexes_created(app):
    indexes = {
        table: {ix['name'] for ix in inspect(db.engine).get_indexes(table)}
        for table in ('booking', 'message', 'event')
    }
    assert {'ix_booking_confirmed_slot', 'ix_booking_player_date'} <= indexes['booking']
    assert {'ix_message_to_read', 'ix_message_from_to_created'} <= indexes['message']
    assert 'ix_event_status_date' in indexes['event']
