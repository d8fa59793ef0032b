"""Tests for the bearer token stores."""
from backend.app import db
from backend.models import AuthSession, Player
from backend.session_store import DatabaseSessionStore, InMemorySessionStore, generate_token


def test_generate_token_is_random_hex():
    one, two = generate_token(), generate_token()
    assert one != two
    assert len(one) == 64
    int(one, 16)


def test_in_memory_store_lifecycle():
    store = InMemorySessionStore()
    token = store.issue(7)
    other = store.issue(7)
    third = store.issue(8)

    assert store.resolve(token) == 7
    assert store.resolve('') is None
    assert store.resolve('missing') is None
    assert len(store) == 3

    store.revoke(token)
    assert store.resolve(token) is None
    store.revoke(token)

    assert store.revoke_player(7) == 1
    assert store.resolve(other) is None
    assert store.resolve(third) == 8


def _player(phone):
    player = Player(name='Store', phone=phone, password_hash='x', zone='Patia', skill_level=5)
    db.session.add(player)
    db.session.commit()
    return player


def test_database_store_keeps_only_hashes(app):
    player = _player('9000000001')
    store = DatabaseSessionStore()

    token = store.issue(player.id)
    row = AuthSession.query.one()
    assert row.token_hash != token
    assert len(row.token_hash) == 64
    assert store.resolve(token) == player.id

    store.revoke(token)
    assert store.resolve(token) is None


def test_database_store_revoke_player(app):
    first = _player('9000000002')
    second = _player('9000000003')
    store = DatabaseSessionStore()
    a = store.issue(first.id)
    store.issue(first.id)
    b = store.issue(second.id)

    assert store.revoke_player(first.id) == 2
    assert store.resolve(a) is None
    assert store.resolve(b) == second.id
