from backend.models import Booking, Connection, Event, Player, Turf


def platform_stats():
    """Aggregate counters for the admin dashboard."""
    return {
        'totalPlayers': Player.query.filter(Player.is_admin.is_(False)).count(),
        'totalBookings': Booking.query.filter_by(status='confirmed').count(),
        'totalConnections': Connection.query.count(),
        'pendingConnections': Connection.query.filter_by(status='pending').count(),
        'totalTurfs': Turf.query.count(),
        'totalEvents': Event.query.count(),
        'openEvents': Event.query.filter_by(status='open').count(),
    }
