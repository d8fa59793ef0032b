"""Pickup-game events: hosting, joining, leaving, cancelling.

Status moves ``open -> full`` when the last slot is taken and back to
``open`` when someone leaves; ``cancelled`` is terminal. Capacity changes
are single conditional UPDATEs so two joins racing for the last slot
cannot both succeed.
"""
from sqlalchemy import case, update
from sqlalchemy.exc import IntegrityError
from backend.app import db
from backend.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from backend.models import Event, EventParticipant, Player, Turf
from backend.time_utils import today_iso

DEFAULT_FORMAT = '5v5'


def _get_event_or_404(event_id):
    event = db.session.get(Event, event_id)
    if not event:
        raise NotFoundError('Event not found')
    return event


def _serialize(event, include_roster=True):
    data = event.to_dict()
    host = event.host
    turf = event.turf
    data['host_name'] = host.name if host else None
    data['host_zone'] = host.zone if host else None
    data['host_skill'] = host.skill_level if host else None
    data['turf_name'] = turf.name if turf else None
    data['turf_location'] = turf.location if turf else None
    data['turf_emoji'] = turf.emoji if turf else None
    data['spots_left'] = event.total_slots - event.filled_slots
    if include_roster:
        data['players'] = [p.to_dict() for p in event.participants if p.player]
    return data


def create_event(host, payload):
    if payload.turf_id is not None and not db.session.get(Turf, payload.turf_id):
        raise NotFoundError('Turf not found')

    event = Event(
        host_id=host.id,
        turf_id=payload.turf_id,
        title=payload.title,
        format=payload.format or DEFAULT_FORMAT,
        date=payload.date.isoformat(),
        time=payload.time,
        total_slots=payload.total_slots,
        filled_slots=1,
        status='open',
        description=payload.description or '',
    )
    db.session.add(event)
    db.session.flush()

    # Host takes the first slot.
    db.session.add(EventParticipant(event_id=event.id, player_id=host.id, role='host'))
    db.session.commit()
    return _serialize(event)


def join_event(event_id, player):
    event = _get_event_or_404(event_id)
    if event.status != 'open':
        raise ValidationError('Event is not open')
    if event.filled_slots >= event.total_slots:
        raise ValidationError('Event is full!')
    if EventParticipant.query.filter_by(event_id=event.id, player_id=player.id).first():
        raise ConflictError('Already joined this event')

    try:
        db.session.add(EventParticipant(event_id=event.id, player_id=player.id, role='player'))
        result = db.session.execute(
            update(Event)
            .where(
                Event.id == event.id,
                Event.status == 'open',
                Event.filled_slots < Event.total_slots,
            )
            .values(
                filled_slots=Event.filled_slots + 1,
                status=case(
                    (Event.filled_slots + 1 >= Event.total_slots, 'full'),
                    else_='open',
                ),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.session.rollback()
            raise ValidationError('Event is full!')
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Already joined this event')

    db.session.refresh(event)
    return {
        'filled_slots': event.filled_slots,
        'total_slots': event.total_slots,
        'status': event.status,
    }


def leave_event(event_id, player):
    event = _get_event_or_404(event_id)
    if event.host_id == player.id:
        raise ValidationError('Host cannot leave. Cancel the event instead')

    removed = EventParticipant.query.filter_by(
        event_id=event.id, player_id=player.id,
    ).delete(synchronize_session='fetch')
    if not removed:
        db.session.rollback()
        raise NotFoundError('You are not in this event')

    # Recompute from the decremented count; cancelled stays cancelled.
    db.session.execute(
        update(Event)
        .where(Event.id == event.id, Event.filled_slots > 0)
        .values(
            filled_slots=Event.filled_slots - 1,
            status=case(
                (Event.status == 'cancelled', 'cancelled'),
                (Event.filled_slots - 1 >= Event.total_slots, 'full'),
                else_='open',
            ),
        )
        .execution_options(synchronize_session=False)
    )
    db.session.commit()

    db.session.refresh(event)
    return {
        'filled_slots': event.filled_slots,
        'total_slots': event.total_slots,
        'status': event.status,
    }


def cancel_event(event_id, caller):
    event = _get_event_or_404(event_id)
    if event.host_id != caller.id and not caller.is_admin:
        raise ForbiddenError('Only host or admin can cancel')

    event.status = 'cancelled'
    db.session.commit()
    return _serialize(event, include_roster=False)


def get_event(event_id):
    event = _get_event_or_404(event_id)
    return _serialize(event)


def list_open_events():
    """Open events from today onwards, soonest first."""
    events = Event.query.join(Player, Player.id == Event.host_id).filter(
        Event.status == 'open',
        Event.date >= today_iso(),
    ).order_by(Event.date.asc(), Event.time.asc(), Event.id.asc()).all()
    return [_serialize(e) for e in events]


def list_my_events(player):
    hosted = Event.query.filter(
        Event.host_id == player.id,
    ).order_by(Event.date.desc(), Event.id.desc()).all()

    joined_rows = db.session.query(Event, EventParticipant.role).join(
        EventParticipant, EventParticipant.event_id == Event.id,
    ).filter(
        EventParticipant.player_id == player.id,
        Event.host_id != player.id,
    ).order_by(Event.date.desc(), Event.id.desc()).all()

    joined = []
    for event, role in joined_rows:
        data = _serialize(event, include_roster=False)
        data['role'] = role
        joined.append(data)

    return {
        'hosted': [_serialize(e, include_roster=False) for e in hosted],
        'joined': joined,
    }


def list_all_events():
    events = Event.query.join(Player, Player.id == Event.host_id).order_by(
        Event.created_at.desc(), Event.id.desc(),
    ).all()
    return [_serialize(e, include_roster=False) for e in events]
