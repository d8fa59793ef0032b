from flask import Blueprint, request, jsonify
from backend.auth_utils import admin_required
from backend.schemas import TurfCreateRequest, TurfUpdateRequest, load_body
from backend.services import turfs

turfs_bp = Blueprint('turfs', __name__)


@turfs_bp.route('', methods=['GET'])
def list_turfs():
    return jsonify({'turfs': turfs.list_turfs()})


@turfs_bp.route('/<int:turf_id>', methods=['GET'])
def get_turf(turf_id):
    return jsonify({'turf': turfs.get_turf(turf_id)})


@turfs_bp.route('/<int:turf_id>/slots', methods=['GET'])
def get_slots(turf_id):
    """Availability of the fixed hourly slots for ``?date=YYYY-MM-DD``."""
    return jsonify(turfs.slots_for(turf_id, request.args.get('date')))


@turfs_bp.route('', methods=['POST'])
@admin_required
def create_turf():
    turf = turfs.create_turf(load_body(TurfCreateRequest))
    return jsonify({'message': 'Turf added!', 'turf': turf}), 201


@turfs_bp.route('/<int:turf_id>', methods=['PUT'])
@admin_required
def update_turf(turf_id):
    turf = turfs.update_turf(turf_id, load_body(TurfUpdateRequest))
    return jsonify({'message': 'Turf updated!', 'turf': turf})


@turfs_bp.route('/<int:turf_id>', methods=['DELETE'])
@admin_required
def delete_turf(turf_id):
    turfs.delete_turf(turf_id)
    return jsonify({'message': 'Turf deleted'})
