"""Direct messages between connected players."""
from sqlalchemy import and_, case, func, or_
from backend.app import db, socketio
from backend.errors import ForbiddenError, NotFoundError, ValidationError
from backend.models import Message, Player
from backend.services.connections import are_connected
from backend.time_utils import isoformat_or_none


def player_room(player_id):
    return f'player_{player_id}'


def _between(player_a_id, player_b_id):
    return or_(
        and_(Message.from_id == player_a_id, Message.to_id == player_b_id),
        and_(Message.from_id == player_b_id, Message.to_id == player_a_id),
    )


def _get_partner_or_404(partner_id):
    partner = db.session.get(Player, partner_id)
    if not partner:
        raise NotFoundError('Player not found')
    return partner


def send_message(sender, payload):
    to_id = payload.to_id
    if to_id == sender.id:
        raise ValidationError('Cannot message yourself')
    _get_partner_or_404(to_id)
    if not are_connected(sender.id, to_id):
        raise ForbiddenError('You can only message connected players')

    msg = Message(from_id=sender.id, to_id=to_id, content=payload.content)
    db.session.add(msg)
    db.session.commit()

    msg_dict = msg.to_dict()
    socketio.emit('new_message', msg_dict, room=player_room(to_id))
    return msg_dict


def conversations(player):
    """One row per counterpart with the latest message, most recent first."""
    partner_expr = case(
        (Message.from_id == player.id, Message.to_id),
        else_=Message.from_id,
    )
    unread_expr = case(
        (and_(Message.to_id == player.id, Message.is_read.is_(False)), 1),
        else_=0,
    )
    # Ids grow with insertion, so the highest id is the latest message.
    summary = db.session.query(
        partner_expr.label('partner_id'),
        func.max(Message.id).label('last_id'),
        func.sum(unread_expr).label('unread'),
    ).filter(
        or_(Message.from_id == player.id, Message.to_id == player.id),
    ).group_by(partner_expr).subquery()

    rows = db.session.query(Message, Player, summary.c.unread).join(
        summary, Message.id == summary.c.last_id,
    ).join(
        Player, Player.id == summary.c.partner_id,
    ).order_by(Message.created_at.desc(), Message.id.desc()).all()

    results = []
    for msg, partner, unread in rows:
        results.append({
            'partner_id': partner.id,
            'partner_name': partner.name,
            'partner_zone': partner.zone,
            'partner_position': partner.position,
            'last_message': msg.content,
            'last_message_at': isoformat_or_none(msg.created_at),
            'unread_count': int(unread or 0),
        })
    return results


def mark_read(player, from_id):
    updated = Message.query.filter_by(
        from_id=from_id, to_id=player.id, is_read=False,
    ).update({'is_read': True}, synchronize_session=False)
    db.session.commit()
    return updated


def thread(player, partner_id):
    """Full history with ``partner_id``; their unread messages become read."""
    partner = _get_partner_or_404(partner_id)
    messages = Message.query.filter(
        _between(player.id, partner.id),
    ).order_by(Message.created_at.asc(), Message.id.asc()).all()
    history = [m.to_dict() for m in messages]

    mark_read(player, partner.id)

    return {
        'partner': {
            'id': partner.id, 'name': partner.name, 'zone': partner.zone,
            'position': partner.position, 'skill_level': partner.skill_level,
        },
        'messages': history,
    }


def unread_count(player):
    return Message.query.filter_by(to_id=player.id, is_read=False).count()
