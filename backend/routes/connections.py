from flask import Blueprint, request, jsonify
from backend.auth_utils import admin_required, login_required
from backend.schemas import ConnectionRequest, load_body
from backend.services import connections

connections_bp = Blueprint('connections', __name__)


@connections_bp.route('', methods=['POST'])
@login_required
def send_request():
    connection = connections.request_connection(
        request.current_player, load_body(ConnectionRequest),
    )
    return jsonify({'message': 'Connect request sent!', 'connection': connection}), 201


@connections_bp.route('/my', methods=['GET'])
@login_required
def my_connections():
    return jsonify(connections.list_mine(request.current_player))


@connections_bp.route('/<int:connection_id>/accept', methods=['PUT'])
@login_required
def accept(connection_id):
    connection = connections.accept(connection_id, request.current_player)
    return jsonify({'message': 'Connection accepted!', 'connection': connection})


@connections_bp.route('/<int:connection_id>/reject', methods=['PUT'])
@login_required
def reject(connection_id):
    connection = connections.reject(connection_id, request.current_player)
    return jsonify({'message': 'Connection rejected', 'connection': connection})


@connections_bp.route('/all', methods=['GET'])
@admin_required
def all_connections():
    return jsonify({'connections': connections.list_all()})
