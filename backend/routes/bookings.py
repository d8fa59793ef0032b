from flask import Blueprint, request, jsonify
from backend.auth_utils import admin_required, login_required
from backend.schemas import BookingRequest, load_body
from backend.services import turfs

bookings_bp = Blueprint('bookings', __name__)


@bookings_bp.route('', methods=['POST'])
@login_required
def create_booking():
    booking = turfs.create_booking(request.current_player, load_body(BookingRequest))
    return jsonify({'message': 'Booking confirmed!', 'booking': booking}), 201


@bookings_bp.route('/my', methods=['GET'])
@login_required
def my_bookings():
    return jsonify({'bookings': turfs.list_my_bookings(request.current_player)})


@bookings_bp.route('/all', methods=['GET'])
@admin_required
def all_bookings():
    return jsonify({'bookings': turfs.list_all_bookings()})


@bookings_bp.route('/<int:booking_id>', methods=['DELETE'])
@login_required
def cancel_booking(booking_id):
    booking = turfs.cancel_booking(booking_id, request.current_player)
    return jsonify({'message': 'Booking cancelled', 'booking': booking})
