from flask import Blueprint, request, jsonify
from backend.auth_utils import admin_required, login_required, optional_current_player
from backend.schemas import PlayerUpdateRequest, load_body
from backend.services import players

players_bp = Blueprint('players', __name__)


@players_bp.route('', methods=['GET'])
def list_players():
    """List non-admin players, optionally filtered by zone and skill."""
    zone = (request.args.get('zone') or '').strip()
    skill = request.args.get('skill', type=int)
    results = players.list_players(zone=zone or None, skill=skill)
    return jsonify({'count': len(results), 'players': results})


@players_bp.route('/<int:player_id>', methods=['GET'])
def get_player(player_id):
    return jsonify({'player': players.get_player(player_id)})


@players_bp.route('/<int:player_id>', methods=['PUT'])
@login_required
def update_player(player_id):
    payload = load_body(PlayerUpdateRequest)
    player = players.update_player(request.current_player, player_id, payload)
    return jsonify({'message': 'Profile updated!', 'player': player})


@players_bp.route('/<int:player_id>', methods=['DELETE'])
@login_required
def delete_player(player_id):
    players.delete_player(request.current_player, player_id)
    return jsonify({'message': 'Player deleted'})


@players_bp.route('/match/<int:player_id>', methods=['GET'])
def match_players(player_id):
    """Score other players against ``player_id``; a bearer token adds connection status."""
    viewer = optional_current_player()
    return jsonify(players.match(player_id, viewer=viewer))


@players_bp.route('/admin/all', methods=['GET'])
@admin_required
def list_all_players():
    return jsonify({'players': players.list_all_players()})
