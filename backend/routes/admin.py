from flask import Blueprint, jsonify
from backend.auth_utils import admin_required
from backend.services.admin import platform_stats

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/stats', methods=['GET'])
@admin_required
def stats():
    return jsonify(platform_stats())
