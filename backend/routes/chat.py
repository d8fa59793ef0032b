import re

from flask import Blueprint, request, jsonify
from flask_socketio import emit, join_room, leave_room
from backend.app import socketio
from backend.auth_utils import get_player_from_token, login_required
from backend.schemas import SendMessageRequest, load_body
from backend.services import messaging

chat_bp = Blueprint('chat', __name__)
_ROOM_PATTERN = re.compile(r'^player_(\d+)$')


def _authorize_socket_join(room, token):
    player = get_player_from_token(token)
    if not player:
        return None, 'Authentication required'

    room_match = _ROOM_PATTERN.match(room)
    if not room_match:
        return None, 'Invalid room'
    if int(room_match.group(1)) != player.id:
        return None, 'Forbidden room'
    return player, None


@chat_bp.route('/conversations', methods=['GET'])
@login_required
def get_conversations():
    return jsonify({'conversations': messaging.conversations(request.current_player)})


@chat_bp.route('/messages/<int:partner_id>', methods=['GET'])
@login_required
def get_messages(partner_id):
    return jsonify(messaging.thread(request.current_player, partner_id))


@chat_bp.route('/send', methods=['POST'])
@login_required
def send_message():
    msg = messaging.send_message(request.current_player, load_body(SendMessageRequest))
    return jsonify({'message': msg}), 201


@chat_bp.route('/read/<int:partner_id>', methods=['PUT'])
@login_required
def mark_read(partner_id):
    updated = messaging.mark_read(request.current_player, partner_id)
    return jsonify({'message': 'Marked as read', 'updated': updated})


@chat_bp.route('/unread', methods=['GET'])
@login_required
def get_unread():
    return jsonify({'unread': messaging.unread_count(request.current_player)})


# WebSocket event handlers
@socketio.on('join')
def on_join(data):
    payload = data if isinstance(data, dict) else {}
    room = str(payload.get('room') or '').strip()
    token = payload.get('token') or request.args.get('token') or ''
    _, error = _authorize_socket_join(room, token)
    if error:
        emit('status', {'error': error})
        return

    join_room(room)
    emit('status', {'message': f'Joined {room}'})


@socketio.on('leave')
def on_leave(data):
    room = (data or {}).get('room', '') if isinstance(data, dict) else ''
    if room:
        leave_room(room)
