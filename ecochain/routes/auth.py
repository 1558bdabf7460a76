from flask import Blueprint, jsonify, g

from ecochain.extensions import limiter
from ecochain.services import users as user_service
from ecochain.utils import get_json_body
from ecochain.utils.auth import generate_token, require_auth

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
@limiter.limit('10 per minute')
def register():
    """
    Register a new user
    POST /api/auth/register
    Body: {
        "email": "user@example.com",
        "password": "password123",
        "name": "Jane Doe",
        "phone": "555-1234"
    }
    """
    data = get_json_body('email', 'password', sanitize=False)

    user = user_service.register_user(
        email=data['email'],
        password=data['password'],
        name=data.get('name'),
        phone=data.get('phone'),
    )
    token = generate_token(user.id, user.role)

    return jsonify({
        'message': 'User registered successfully',
        'token': token,
        'user': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
@limiter.limit('10 per minute')
def login():
    """
    Login user
    POST /api/auth/login
    Body: {"email": "user@example.com", "password": "password123"}
    """
    data = get_json_body('email', 'password', sanitize=False)

    user = user_service.authenticate(data['email'], data['password'])
    token = generate_token(user.id, user.role)

    return jsonify({
        'message': 'Login successful',
        'token': token,
        'user': user.to_dict()
    }), 200


@auth_bp.route('/me', methods=['GET'])
@require_auth
def current_user():
    """GET /api/auth/me"""
    return jsonify({'user': g.current_user.to_dict()}), 200
