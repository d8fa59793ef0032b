from functools import wraps
from flask import request
from werkzeug.security import generate_password_hash, check_password_hash
from backend.app import db
from backend.errors import ForbiddenError, UnauthorizedError
from backend.models import Player
from backend.session_store import get_session_store


def hash_password(raw_password):
    return generate_password_hash(raw_password)


def password_matches(player, raw_password):
    return check_password_hash(player.password_hash, raw_password)


def _normalize_bearer_token(raw_token):
    token = str(raw_token or '').strip()
    if token.startswith('Bearer '):
        token = token.split(' ', 1)[1].strip()
    return token


def bearer_token():
    """Raw token from the Authorization header, or '' when absent."""
    return _normalize_bearer_token(request.headers.get('Authorization', ''))


def get_player_from_token(token):
    """Resolve a player from a raw bearer token value."""
    normalized = _normalize_bearer_token(token)
    if not normalized:
        return None
    player_id = get_session_store().resolve(normalized)
    if player_id is None:
        return None
    return db.session.get(Player, player_id)


def optional_current_player():
    return get_player_from_token(bearer_token())


def login_required(f):
    """Decorator to require authentication on a route."""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = bearer_token()
        if not token:
            raise UnauthorizedError('Login required')
        player = get_player_from_token(token)
        if not player:
            raise UnauthorizedError('Not authenticated')
        request.current_player = player
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    """Decorator to require an authenticated admin player on a route."""
    @wraps(f)
    @login_required
    def decorated(*args, **kwargs):
        if not request.current_player.is_admin:
            raise ForbiddenError('Admin only')
        return f(*args, **kwargs)
    return decorated
