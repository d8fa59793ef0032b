from flask import Blueprint, request, jsonify
from backend.auth_utils import admin_required, login_required
from backend.schemas import EventCreateRequest, load_body
from backend.services import events

events_bp = Blueprint('events', __name__)


@events_bp.route('', methods=['GET'])
def list_events():
    """Upcoming open events with rosters."""
    return jsonify({'events': events.list_open_events()})


@events_bp.route('/<int:event_id>', methods=['GET'])
def get_event(event_id):
    return jsonify({'event': events.get_event(event_id)})


@events_bp.route('', methods=['POST'])
@login_required
def create_event():
    event = events.create_event(request.current_player, load_body(EventCreateRequest))
    return jsonify({'message': 'Event created! 🎉', 'event': event}), 201


@events_bp.route('/<int:event_id>/join', methods=['POST'])
@login_required
def join_event(event_id):
    result = events.join_event(event_id, request.current_player)
    return jsonify({'message': 'Joined the game! 🙌', **result})


@events_bp.route('/<int:event_id>/leave', methods=['POST'])
@login_required
def leave_event(event_id):
    result = events.leave_event(event_id, request.current_player)
    return jsonify({'message': 'Left the event', **result})


@events_bp.route('/<int:event_id>/cancel', methods=['PUT'])
@login_required
def cancel_event(event_id):
    event = events.cancel_event(event_id, request.current_player)
    return jsonify({'message': 'Event cancelled', 'event': event})


@events_bp.route('/my/list', methods=['GET'])
@login_required
def my_events():
    return jsonify(events.list_my_events(request.current_player))


@events_bp.route('/all/list', methods=['GET'])
@admin_required
def all_events():
    return jsonify({'events': events.list_all_events()})
