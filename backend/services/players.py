"""Player accounts: registration, login, profiles and matchmaking."""
import logging

from sqlalchemy import case, func, or_
from sqlalchemy.exc import IntegrityError
from backend.app import db
from backend.auth_utils import hash_password, password_matches
from backend.errors import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from backend.models import AuthSession, Connection, Player
from backend.services.matching import CANDIDATE_LIMIT, match_percent
from backend.session_store import get_session_store

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ('name', 'zone', 'skill_level', 'position', 'bio', 'avatar_url')


def _get_player_or_404(player_id):
    player = db.session.get(Player, player_id)
    if not player:
        raise NotFoundError('Player not found')
    return player


def register(payload):
    """Create a player from a validated ``RegisterRequest`` and log them in."""
    if Player.query.filter_by(phone=payload.phone).first():
        raise ConflictError('Phone number already registered. Try logging in.')

    player = Player(
        name=payload.name,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        zone=payload.zone,
        skill_level=payload.skill_level,
        position=payload.position or 'Any',
        bio=payload.bio or '',
    )
    db.session.add(player)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Phone number already registered. Try logging in.')

    token = get_session_store().issue(player.id)
    return {'player': player.to_dict(), 'token': token}


def login(payload):
    player = Player.query.filter_by(phone=payload.phone).first()
    if not player:
        raise UnauthorizedError('No account found with this phone number')
    if not password_matches(player, payload.password):
        raise UnauthorizedError('Incorrect password')

    token = get_session_store().issue(player.id)
    return {'player': player.to_dict(), 'token': token}


def logout(token):
    if token:
        get_session_store().revoke(token)


def get_player(player_id):
    return _get_player_or_404(player_id).to_public_dict()


def list_players(zone=None, skill=None):
    """Non-admin players, newest first."""
    query = Player.query.filter(Player.is_admin.is_(False))
    if zone:
        query = query.filter(Player.zone == zone)
    if skill is not None:
        query = query.filter(Player.skill_level == skill)
    players = query.order_by(Player.created_at.desc(), Player.id.desc()).all()
    return [p.to_public_dict() for p in players]


def list_all_players():
    players = Player.query.order_by(Player.created_at.desc(), Player.id.desc()).all()
    return [p.to_dict() for p in players]


def update_player(caller, target_id, payload):
    if caller.id != target_id and not caller.is_admin:
        raise ForbiddenError('Not authorized')
    player = _get_player_or_404(target_id)

    changes = payload.model_dump(exclude_none=True)
    for field in _UPDATABLE_FIELDS:
        value = changes.get(field)
        # Blank strings leave the stored value alone, except bio which may be cleared.
        if value is None or (value == '' and field != 'bio'):
            continue
        setattr(player, field, value)

    db.session.commit()
    return player.to_public_dict()


def delete_player(caller, target_id):
    """Hard delete.

    Where the database enforces foreign keys, a player still referenced by
    bookings, events, connections or messages is refused with a conflict.
    """
    if not caller.is_admin:
        raise ForbiddenError('Admin only')
    _get_player_or_404(target_id)

    try:
        # Persisted tokens reference the player, so they go first.
        stored = AuthSession.query.filter_by(player_id=target_id).delete(synchronize_session=False)
        # Bulk delete so the ORM does not try to null out child foreign keys.
        Player.query.filter_by(id=target_id).delete(synchronize_session='fetch')
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Player still has dependent records')

    revoked = stored + get_session_store().revoke_player(target_id)
    logger.info('Deleted player %s and revoked %s session(s)', target_id, revoked)


def _connected_player_ids(viewer_id):
    connections = Connection.query.filter(
        or_(Connection.from_player_id == viewer_id, Connection.to_player_id == viewer_id),
        Connection.status != 'rejected',
    ).all()
    return {
        c.to_player_id if c.from_player_id == viewer_id else c.from_player_id
        for c in connections
    }


def match(target_id, viewer=None):
    """Rank other players by how well they match ``target_id``.

    Candidates are capped to the closest ``CANDIDATE_LIMIT`` by zone then
    skill before scoring, then sorted by score. The sort is stable so ties
    keep the zone-then-skill order.
    """
    target = _get_player_or_404(target_id)
    connected_ids = _connected_player_ids(viewer.id) if viewer else set()

    same_zone = case((Player.zone == target.zone, 1), else_=0)
    skill_diff = func.abs(Player.skill_level - target.skill_level)
    candidates = Player.query.filter(
        Player.id != target.id,
        Player.is_admin.is_(False),
    ).order_by(same_zone.desc(), skill_diff.asc(), Player.id.asc()).limit(CANDIDATE_LIMIT).all()

    results = []
    for candidate in candidates:
        results.append({
            'id': candidate.id,
            'name': candidate.name,
            'zone': candidate.zone,
            'skill_level': candidate.skill_level,
            'position': candidate.position,
            'bio': candidate.bio,
            'avatar_url': candidate.avatar_url,
            'match_percent': match_percent(
                target.skill_level, target.zone, candidate.skill_level, candidate.zone,
            ),
            'connection_status': 'connected' if candidate.id in connected_ids else None,
        })
    results.sort(key=lambda item: item['match_percent'], reverse=True)

    return {
        'player': {'id': target.id, 'name': target.name, 'zone': target.zone},
        'matches': results,
    }
