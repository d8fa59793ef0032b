"""Turfs, their hourly slots, and bookings against those slots."""
import logging
from datetime import date as date_type

from sqlalchemy.exc import IntegrityError
from backend.app import db
from backend.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from backend.models import Booking, Player, Turf

logger = logging.getLogger(__name__)

SLOT_LABELS = ('4:00 PM', '5:00 PM', '6:00 PM', '7:00 PM', '8:00 PM', '9:00 PM')
DEFAULT_FORMATS = '5v5'
DEFAULT_EMOJI = '⚽'


def _get_turf_or_404(turf_id):
    turf = db.session.get(Turf, turf_id)
    if not turf:
        raise NotFoundError('Turf not found')
    return turf


def parse_booking_date(raw_date):
    """Validate a ``YYYY-MM-DD`` string and return it normalized."""
    if not raw_date:
        raise ValidationError('date query param required')
    try:
        return date_type.fromisoformat(str(raw_date).strip()).isoformat()
    except ValueError:
        raise ValidationError('date must be in YYYY-MM-DD format') from None


# ── Turfs ─────────────────────────────────────

def list_turfs():
    return [t.to_dict() for t in Turf.query.order_by(Turf.id.asc()).all()]


def get_turf(turf_id):
    return _get_turf_or_404(turf_id).to_dict()


def create_turf(payload):
    turf = Turf(
        name=payload.name,
        location=payload.location,
        price_per_hour=payload.price_per_hour,
        formats=payload.formats or DEFAULT_FORMATS,
        emoji=payload.emoji or DEFAULT_EMOJI,
        description=payload.description or '',
    )
    db.session.add(turf)
    db.session.commit()
    return turf.to_dict()


def update_turf(turf_id, payload):
    turf = _get_turf_or_404(turf_id)
    for field, value in payload.model_dump(exclude_none=True).items():
        if value == '':
            continue
        setattr(turf, field, value)
    db.session.commit()
    return turf.to_dict()


def delete_turf(turf_id):
    _get_turf_or_404(turf_id)
    try:
        Turf.query.filter_by(id=turf_id).delete(synchronize_session='fetch')
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Turf still has bookings or events')


def slots_for(turf_id, raw_date):
    turf = _get_turf_or_404(turf_id)
    day = parse_booking_date(raw_date)

    booked = {
        row.slot for row in Booking.query.filter_by(
            turf_id=turf.id, date=day, status='confirmed',
        ).all()
    }
    slots = [{'time': label, 'available': label not in booked} for label in SLOT_LABELS]
    return {'turf': turf.to_dict(), 'date': day, 'slots': slots}


# ── Bookings ──────────────────────────────────

def _booking_view(booking):
    data = booking.to_dict()
    data['turf_name'] = booking.turf.name
    data['turf_location'] = booking.turf.location
    data['turf_emoji'] = booking.turf.emoji
    return data


def _slot_taken(turf_id, day, slot):
    return Booking.query.filter_by(
        turf_id=turf_id, date=day, slot=slot, status='confirmed',
    ).first() is not None


def create_booking(player, payload):
    """Book a slot; the partial unique index settles races the pre-check misses."""
    turf = _get_turf_or_404(payload.turf_id)
    if payload.slot not in SLOT_LABELS:
        raise ValidationError(f'slot must be one of: {", ".join(SLOT_LABELS)}')
    day = payload.date.isoformat()

    if _slot_taken(turf.id, day, payload.slot):
        raise ConflictError('This slot is already booked')

    booking = Booking(player_id=player.id, turf_id=turf.id, date=day, slot=payload.slot)
    db.session.add(booking)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info('Concurrent booking rejected for turf %s on %s at %s', turf.id, day, payload.slot)
        raise ConflictError('Slot already booked')
    return _booking_view(booking)


def cancel_booking(booking_id, caller):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        raise NotFoundError('Booking not found')
    if booking.player_id != caller.id and not caller.is_admin:
        raise ForbiddenError('Not authorized')

    booking.status = 'cancelled'
    db.session.commit()
    return booking.to_dict()


def list_my_bookings(player):
    bookings = Booking.query.join(Turf, Turf.id == Booking.turf_id).filter(
        Booking.player_id == player.id,
    ).order_by(Booking.date.desc(), Booking.slot.desc(), Booking.id.desc()).all()
    return [_booking_view(b) for b in bookings]


def list_all_bookings():
    bookings = (
        Booking.query
        .join(Turf, Turf.id == Booking.turf_id)
        .join(Player, Player.id == Booking.player_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )
    results = []
    for booking in bookings:
        data = booking.to_dict()
        data['turf_name'] = booking.turf.name
        data['player_name'] = booking.player.name
        data['player_phone'] = booking.player.phone
        results.append(data)
    return results
