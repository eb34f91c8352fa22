"""Health check routes for the planning poker server."""

from flask import Blueprint, jsonify, current_app

from planning_poker import __version__

SERVICE_NAME = 'planning-poker'


def init_health_routes():
    """Initialize health check routes."""
    health_bp = Blueprint('health', __name__)

    @health_bp.route('/api/health', methods=['GET'])
    def health_check():
        """Basic health check - always returns healthy if server is running."""
        return jsonify({
            'status': 'healthy',
            'service': SERVICE_NAME,
            'version': __version__
        }), 200

    @health_bp.route('/api/health/ready', methods=['GET'])
    def readiness_check():
        """Readiness check - the room registry is initialized."""
        room_repository = current_app.extensions.get('room_repository')

        if room_repository is None:
            return jsonify({
                'status': 'unavailable',
                'service': SERVICE_NAME,
                'message': 'Room registry not initialized'
            }), 503

        return jsonify({
            'status': 'ready',
            'service': SERVICE_NAME,
            'rooms': len(room_repository)
        }), 200

    return health_bp
