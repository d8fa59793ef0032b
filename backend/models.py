from sqlalchemy import text
from backend.app import db
from backend.time_utils import utcnow_naive, isoformat_or_none

BOOKING_STATUSES = ('confirmed', 'cancelled')
CONNECTION_STATUSES = ('pending', 'accepted', 'rejected')
EVENT_STATUSES = ('open', 'full', 'cancelled')


class Player(db.Model):
    __table_args__ = (
        db.CheckConstraint('skill_level BETWEEN 1 AND 10', name='ck_player_skill_level'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(10), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    zone = db.Column(db.String(120), nullable=False)
    skill_level = db.Column(db.Integer, nullable=False)
    position = db.Column(db.String(50), default='Any')
    bio = db.Column(db.Text, default='')
    avatar_url = db.Column(db.String(500), default='')
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'phone': self.phone,
            'zone': self.zone, 'skill_level': self.skill_level,
            'position': self.position, 'bio': self.bio,
            'avatar_url': self.avatar_url, 'is_admin': bool(self.is_admin),
            'created_at': isoformat_or_none(self.created_at),
        }

    def to_public_dict(self):
        """Profile fields shown to other players (no admin flag)."""
        data = self.to_dict()
        data.pop('is_admin')
        return data


class Turf(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(300), nullable=False)
    price_per_hour = db.Column(db.Integer, nullable=False)
    formats = db.Column(db.String(100), default='5v5')
    emoji = db.Column(db.String(16), default='⚽')
    description = db.Column(db.Text, default='')

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'location': self.location,
            'price_per_hour': self.price_per_hour, 'formats': self.formats,
            'emoji': self.emoji, 'description': self.description,
        }


class Booking(db.Model):
    # Only confirmed bookings hold a slot; cancelled rows stay for history.
    __table_args__ = (
        db.Index(
            'ix_booking_confirmed_slot', 'turf_id', 'date', 'slot',
            unique=True,
            sqlite_where=text("status = 'confirmed'"),
            postgresql_where=text("status = 'confirmed'"),
        ),
        db.Index('ix_booking_player_date', 'player_id', 'date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    turf_id = db.Column(db.Integer, db.ForeignKey('turf.id'), nullable=False)
    date = db.Column(db.String(10), nullable=False)
    slot = db.Column(db.String(20), nullable=False)
    status = db.Column(db.String(20), default='confirmed', nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    player = db.relationship('Player', backref='bookings')
    turf = db.relationship('Turf', backref='bookings')

    def to_dict(self):
        return {
            'id': self.id, 'player_id': self.player_id, 'turf_id': self.turf_id,
            'date': self.date, 'slot': self.slot, 'status': self.status,
            'created_at': isoformat_or_none(self.created_at),
        }


class Connection(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    from_player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    to_player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    status = db.Column(db.String(20), default='pending', nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    from_player = db.relationship('Player', foreign_keys=[from_player_id], backref='sent_connections')
    to_player = db.relationship('Player', foreign_keys=[to_player_id], backref='received_connections')

    def to_dict(self):
        return {
            'id': self.id, 'from_player_id': self.from_player_id,
            'to_player_id': self.to_player_id, 'status': self.status,
            'created_at': isoformat_or_none(self.created_at),
        }


class Event(db.Model):
    """Player-hosted pickup game with a fixed number of slots."""
    __table_args__ = (
        db.CheckConstraint('total_slots BETWEEN 2 AND 22', name='ck_event_total_slots'),
        db.CheckConstraint(
            'filled_slots >= 0 AND filled_slots <= total_slots',
            name='ck_event_filled_slots',
        ),
        db.Index('ix_event_status_date', 'status', 'date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    host_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    turf_id = db.Column(db.Integer, db.ForeignKey('turf.id'), nullable=True)
    title = db.Column(db.String(200), nullable=False)
    format = db.Column(db.String(20), default='5v5')
    date = db.Column(db.String(10), nullable=False)
    time = db.Column(db.String(20), nullable=False)
    total_slots = db.Column(db.Integer, nullable=False)
    filled_slots = db.Column(db.Integer, default=1, nullable=False)
    status = db.Column(db.String(20), default='open', nullable=False)  # open, full, cancelled
    description = db.Column(db.Text, default='')
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    host = db.relationship('Player', backref='hosted_events')
    turf = db.relationship('Turf', backref='events')
    participants = db.relationship(
        'EventParticipant', backref='event', cascade='all, delete-orphan',
        order_by='EventParticipant.id',
    )

    def to_dict(self):
        return {
            'id': self.id, 'host_id': self.host_id, 'turf_id': self.turf_id,
            'title': self.title, 'format': self.format,
            'date': self.date, 'time': self.time,
            'total_slots': self.total_slots, 'filled_slots': self.filled_slots,
            'status': self.status, 'description': self.description,
            'created_at': isoformat_or_none(self.created_at),
        }


class EventParticipant(db.Model):
    __table_args__ = (
        db.UniqueConstraint('event_id', 'player_id', name='uq_event_participant_event_player'),
    )

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('event.id'), nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    role = db.Column(db.String(20), default='player', nullable=False)  # host, player
    joined_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    player = db.relationship('Player', backref='event_participations')

    def to_dict(self):
        data = {
            'id': self.id, 'event_id': self.event_id, 'player_id': self.player_id,
            'role': self.role, 'joined_at': isoformat_or_none(self.joined_at),
        }
        if self.player:
            data['name'] = self.player.name
            data['position'] = self.player.position
            data['skill_level'] = self.player.skill_level
        return data


class Message(db.Model):
    __table_args__ = (
        db.Index('ix_message_to_read', 'to_id', 'is_read'),
        db.Index('ix_message_from_to_created', 'from_id', 'to_id', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    from_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    to_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    sender = db.relationship('Player', foreign_keys=[from_id])

    def to_dict(self):
        return {
            'id': self.id, 'from_id': self.from_id, 'to_id': self.to_id,
            'content': self.content, 'is_read': bool(self.is_read),
            'from_name': self.sender.name if self.sender else None,
            'created_at': isoformat_or_none(self.created_at),
        }


class AuthSession(db.Model):
    """Durable bearer token record; only the sha256 of the token is stored."""
    id = db.Column(db.Integer, primary_key=True)
    token_hash = db.Column(db.String(64), unique=True, nullable=False)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
