from flask import Blueprint, jsonify, g

from ecochain.services import pickups as pickup_service
from ecochain.utils import get_json_body
from ecochain.utils.auth import require_auth, require_role

pickups_bp = Blueprint('pickups', __name__)


def _serialize(pickups):
    return [pickup.to_dict() for pickup in pickups]


@pickups_bp.route('', methods=['POST'])
@require_auth
@require_role('citizen')
def create_pickup():
    """
    Create a pickup request
    POST /api/pickups
    Body: {
        "material_type": "plastic",
        "estimated_weight": 5,
        "address": "12 Green St",
        "latitude": 12.97,
        "longitude": 77.59,
        "notes": "Bags by the gate",
        "scheduled_date": "2024-05-01T10:00:00Z"
    }

    An empty address is filled in by reverse geocoding the coordinates.
    """
    data = get_json_body('material_type', 'estimated_weight', 'latitude', 'longitude')

    pickup = pickup_service.create_pickup(
        g.current_user,
        material_type=data['material_type'],
        estimated_weight=data['estimated_weight'],
        address=data.get('address'),
        latitude=data['latitude'],
        longitude=data['longitude'],
        notes=data.get('notes'),
        scheduled_date=data.get('scheduled_date'),
    )

    return jsonify({
        'message': 'Pickup requested successfully',
        'pickup_id': pickup.id,
        'pickup': pickup.to_dict(),
    }), 201


@pickups_bp.route('/mine', methods=['GET'])
@require_auth
def list_my_pickups():
    """GET /api/pickups/mine - the caller's own requests, newest first"""
    pickups = pickup_service.get_user_pickups(g.current_user)
    return jsonify({'pickups': _serialize(pickups)}), 200


@pickups_bp.route('/pending', methods=['GET'])
@require_auth
@require_role('collector', 'admin')
def list_pending_pickups():
    """GET /api/pickups/pending - open requests collectors can accept"""
    pickups = pickup_service.get_pending_pickups()
    return jsonify({'pickups': _serialize(pickups)}), 200


@pickups_bp.route('/assigned', methods=['GET'])
@require_auth
@require_role('collector')
def list_assigned_pickups():
    """GET /api/pickups/assigned - pickups accepted by the calling collector"""
    pickups = pickup_service.get_collector_pickups(g.current_user)
    return jsonify({'pickups': _serialize(pickups)}), 200


@pickups_bp.route('/<pickup_id>', methods=['GET'])
@require_auth
def get_pickup(pickup_id):
    """GET /api/pickups/<pickup_id>"""
    pickup = pickup_service.get_pickup(g.current_user, pickup_id)
    return jsonify({'pickup': pickup.to_dict()}), 200


@pickups_bp.route('/<pickup_id>/cancel', methods=['POST'])
@require_auth
def cancel_pickup(pickup_id):
    """POST /api/pickups/<pickup_id>/cancel"""
    pickup_service.cancel_pickup(g.current_user, pickup_id)
    return jsonify({'message': 'Pickup cancelled'}), 200


@pickups_bp.route('/<pickup_id>/accept', methods=['POST'])
@require_auth
def accept_pickup(pickup_id):
    """POST /api/pickups/<pickup_id>/accept"""
    pickup = pickup_service.accept_pickup(g.current_user, pickup_id)
    return jsonify({'message': 'Pickup accepted', 'pickup': pickup.to_dict()}), 200


@pickups_bp.route('/<pickup_id>/complete', methods=['POST'])
@require_auth
def complete_pickup(pickup_id):
    """
    POST /api/pickups/<pickup_id>/complete
    Body: {"actual_weight": 4.8}
    """
    data = get_json_body('actual_weight')
    result = pickup_service.complete_pickup(g.current_user, pickup_id, data['actual_weight'])

    return jsonify({'message': 'Pickup completed', **result}), 200


@pickups_bp.route('/<pickup_id>/rate-citizen', methods=['POST'])
@require_auth
def rate_citizen(pickup_id):
    """
    POST /api/pickups/<pickup_id>/rate-citizen
    Body: {"rating": 5, "feedback": "Well sorted"}
    """
    data = get_json_body('rating')
    pickup_service.rate_citizen(g.current_user, pickup_id, data['rating'], data.get('feedback'))
    return jsonify({'message': 'Rating submitted'}), 200


@pickups_bp.route('/<pickup_id>/rate-collector', methods=['POST'])
@require_auth
def rate_collector(pickup_id):
    """
    POST /api/pickups/<pickup_id>/rate-collector
    Body: {"rating": 4, "feedback": "On time"}
    """
    data = get_json_body('rating')
    pickup_service.rate_collector(g.current_user, pickup_id, data['rating'], data.get('feedback'))
    return jsonify({'message': 'Rating submitted'}), 200
