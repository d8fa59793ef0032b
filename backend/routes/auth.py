from flask import Blueprint, request, jsonify
from backend.auth_utils import bearer_token, login_required
from backend.schemas import LoginRequest, RegisterRequest, load_body
from backend.services import players

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    payload = load_body(RegisterRequest)
    result = players.register(payload)
    return jsonify({'message': 'Account created!', **result}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    payload = load_body(LoginRequest)
    result = players.login(payload)
    return jsonify({'message': 'Login successful!', **result})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'player': request.current_player.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    players.logout(bearer_token())
    return jsonify({'message': 'Logged out'})
