"""Bearer token registry.

Tokens are opaque random strings mapped to a player id. They never expire;
they are only dropped by logout or when the player is deleted.
"""
import hashlib
import secrets
import threading

from flask import current_app
from backend.app import db

TOKEN_BYTES = 32


def generate_token():
    return secrets.token_hex(TOKEN_BYTES)


class SessionStore:
    """Interface every token backend implements."""

    def issue(self, player_id):
        raise NotImplementedError

    def resolve(self, token):
        raise NotImplementedError

    def revoke(self, token):
        raise NotImplementedError

    def revoke_player(self, player_id):
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Process-lifetime store; every token is lost on restart."""

    def __init__(self):
        self._tokens = {}
        self._lock = threading.Lock()

    def issue(self, player_id):
        token = generate_token()
        with self._lock:
            self._tokens[token] = int(player_id)
        return token

    def resolve(self, token):
        if not token:
            return None
        with self._lock:
            return self._tokens.get(token)

    def revoke(self, token):
        with self._lock:
            self._tokens.pop(token, None)

    def revoke_player(self, player_id):
        with self._lock:
            stale = [t for t, pid in self._tokens.items() if pid == player_id]
            for token in stale:
                del self._tokens[token]
        return len(stale)

    def __len__(self):
        with self._lock:
            return len(self._tokens)


def _hash_token(raw_token):
    return hashlib.sha256(str(raw_token or '').encode('utf-8')).hexdigest()


class DatabaseSessionStore(SessionStore):
    """Tokens survive restarts; must be used inside an app context."""

    def issue(self, player_id):
        from backend.models import AuthSession

        token = generate_token()
        db.session.add(AuthSession(token_hash=_hash_token(token), player_id=int(player_id)))
        db.session.commit()
        return token

    def resolve(self, token):
        from backend.models import AuthSession

        if not token:
            return None
        row = AuthSession.query.filter_by(token_hash=_hash_token(token)).first()
        return row.player_id if row else None

    def revoke(self, token):
        from backend.models import AuthSession

        AuthSession.query.filter_by(token_hash=_hash_token(token)).delete(synchronize_session=False)
        db.session.commit()

    def revoke_player(self, player_id):
        from backend.models import AuthSession

        removed = AuthSession.query.filter_by(player_id=player_id).delete(synchronize_session=False)
        db.session.commit()
        return removed


_BACKENDS = {
    'memory': InMemorySessionStore,
    'database': DatabaseSessionStore,
}


def build_session_store(backend_name):
    key = str(backend_name or 'memory').strip().lower()
    if key not in _BACKENDS:
        raise RuntimeError(f'Unknown SESSION_STORE backend: {backend_name!r}')
    return _BACKENDS[key]()


def get_session_store():
    return current_app.extensions['session_store']
