from flask import Blueprint, jsonify, g

from ecochain.services import users as user_service
from ecochain.utils import get_json_body
from ecochain.utils.auth import generate_token, require_auth, require_role

users_bp = Blueprint('users', __name__)


@users_bp.route('/role', methods=['POST'])
@require_auth
def set_role():
    """
    Choose a role after signing up
    POST /api/users/role
    Body: {"role": "citizen" | "collector"}

    Returns a fresh token carrying the new role.
    """
    data = get_json_body('role')
    user = user_service.set_role(g.current_user, data['role'])

    return jsonify({
        'success': True,
        'role': user.role,
        'token': generate_token(user.id, user.role),
    }), 200


@users_bp.route('/availability', methods=['POST'])
@require_auth
@require_role('collector')
def set_availability():
    """
    POST /api/users/availability
    Body: {"is_available": true}
    """
    data = get_json_body()
    user = user_service.set_availability(g.current_user, data.get('is_available'))

    return jsonify({'success': True, 'is_available': user.is_available}), 200
