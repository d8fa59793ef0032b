"""Player-to-player connection requests."""
from sqlalchemy import and_, or_
from sqlalchemy.orm import aliased
from backend.app import db
from backend.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from backend.models import Connection, Player


def _between(player_a_id, player_b_id):
    return or_(
        and_(Connection.from_player_id == player_a_id, Connection.to_player_id == player_b_id),
        and_(Connection.from_player_id == player_b_id, Connection.to_player_id == player_a_id),
    )


def find_between(player_a_id, player_b_id, status=None):
    query = Connection.query.filter(_between(player_a_id, player_b_id))
    if status:
        query = query.filter(Connection.status == status)
    return query.first()


def are_connected(player_a_id, player_b_id):
    return find_between(player_a_id, player_b_id, status='accepted') is not None


def request_connection(from_player, payload):
    to_id = payload.to_player_id
    if to_id == from_player.id:
        raise ValidationError('Cannot connect to yourself')
    if not db.session.get(Player, to_id):
        raise NotFoundError('Player not found')

    existing = find_between(from_player.id, to_id)
    if existing:
        raise ConflictError('Connection already exists', payload={'connection': existing.to_dict()})

    connection = Connection(from_player_id=from_player.id, to_player_id=to_id)
    db.session.add(connection)
    db.session.commit()
    return connection.to_dict()


def _with_counterpart(connection, prefix, counterpart):
    data = connection.to_dict()
    data[f'{prefix}_name'] = counterpart.name
    data[f'{prefix}_zone'] = counterpart.zone
    data[f'{prefix}_skill'] = counterpart.skill_level
    data[f'{prefix}_position'] = counterpart.position
    return data


def list_mine(player):
    newest_first = (Connection.created_at.desc(), Connection.id.desc())
    incoming = Connection.query.join(
        Player, Player.id == Connection.from_player_id,
    ).filter(Connection.to_player_id == player.id).order_by(*newest_first).all()
    outgoing = Connection.query.join(
        Player, Player.id == Connection.to_player_id,
    ).filter(Connection.from_player_id == player.id).order_by(*newest_first).all()

    return {
        'incoming': [_with_counterpart(c, 'from', c.from_player) for c in incoming],
        'outgoing': [_with_counterpart(c, 'to', c.to_player) for c in outgoing],
    }


def _transition(connection_id, caller, new_status):
    connection = db.session.get(Connection, connection_id)
    if not connection:
        raise NotFoundError('Connection not found')
    if connection.to_player_id != caller.id:
        raise ForbiddenError('Not authorized')
    if connection.status != 'pending':
        raise ConflictError(f'Connection is already {connection.status}')

    connection.status = new_status
    db.session.commit()
    return connection.to_dict()


def accept(connection_id, caller):
    return _transition(connection_id, caller, 'accepted')


def reject(connection_id, caller):
    return _transition(connection_id, caller, 'rejected')


def list_all():
    sender = aliased(Player)
    recipient = aliased(Player)
    rows = db.session.query(Connection, sender, recipient).join(
        sender, sender.id == Connection.from_player_id,
    ).join(
        recipient, recipient.id == Connection.to_player_id,
    ).order_by(Connection.created_at.desc(), Connection.id.desc()).all()

    results = []
    for connection, from_player, to_player in rows:
        data = connection.to_dict()
        data['from_name'] = from_player.name
        data['from_phone'] = from_player.phone
        data['to_name'] = to_player.name
        data['to_phone'] = to_player.phone
        results.append(data)
    return results
