"""Seed default turfs and the admin account on an empty database."""
import logging

from backend.app import db
from backend.auth_utils import hash_password
from backend.models import Player, Turf

logger = logging.getLogger(__name__)

DEFAULT_TURFS = (
    {
        'name': 'Kick Off Turf', 'location': 'Patia, near KIIT Square',
        'price_per_hour': 1200, 'formats': '5v5, 7v7', 'emoji': '⚡',
        'description': '5v5 and 7v7 available. Floodlights included.',
    },
    {
        'name': 'The Arena', 'location': 'Jaydev Vihar',
        'price_per_hour': 1000, 'formats': '5v5', 'emoji': '🥅',
        'description': 'Best for 5v5. Parking available.',
    },
    {
        'name': 'Soccer City', 'location': 'Khandagiri / Jagamara',
        'price_per_hour': 800, 'formats': '6v6', 'emoji': '⚽',
        'description': 'Budget friendly. 6v6 size.',
    },
)


def seed_turfs(turfs=DEFAULT_TURFS):
    """Insert the default turfs only when the turf table is empty."""
    if Turf.query.first():
        return 0

    try:
        for row in turfs:
            db.session.add(Turf(**row))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info('Seeded %s default turfs', len(turfs))
    return len(turfs)


def seed_admin(name, phone, password, zone):
    """Create an admin account unless one already exists. Returns True when created."""
    if Player.query.filter(Player.is_admin.is_(True)).first():
        return False
    if Player.query.filter_by(phone=phone).first():
        logger.warning('Admin seed skipped: phone %s already belongs to a player', phone)
        return False

    db.session.add(Player(
        name=name,
        phone=phone,
        password_hash=hash_password(password),
        zone=zone,
        skill_level=10,
        position='Any',
        is_admin=True,
    ))
    db.session.commit()
    logger.info('Seeded admin account (phone: %s)', phone)
    return True
