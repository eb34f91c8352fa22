"""Read-only HTTP view of active rooms, for monitoring."""

import logging
from flask import Blueprint, jsonify

from planning_poker.server.utils.validation import validate_room_id

logger = logging.getLogger(__name__)


def init_room_routes(room_controller):
    room_bp = Blueprint('rooms', __name__, url_prefix='/api')

    @room_bp.route('/rooms', methods=['GET'])
    def list_rooms():
        """List active rooms without connection ids."""
        try:
            rooms = room_controller.list_rooms()
            return jsonify({'rooms': rooms, 'count': len(rooms)}), 200
        except Exception as e:
            logger.error("list_rooms_failed error=%s", e, exc_info=True)
            return jsonify({'error': 'Failed to list rooms'}), 500

    @room_bp.route('/rooms/<room_id>', methods=['GET'])
    def get_room(room_id):
        """Summary of one room."""
        try:
            room = room_controller.get_room(validate_room_id(room_id))
            if room is None:
                return jsonify({'error': 'Room not found'}), 404

            return jsonify({'room': room.summary()}), 200
        except Exception as e:
            logger.error("get_room_failed room=%s error=%s", room_id, e, exc_info=True)
            return jsonify({'error': 'Failed to load room'}), 500

    return room_bp
