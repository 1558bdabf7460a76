"""
Token issuing and route guards
"""
import jwt
from datetime import datetime, timezone
from functools import wraps
from flask import request, jsonify, current_app, g

from ecochain import db
from ecochain.models import User


def generate_token(user_id: str, role: str = None) -> str:
    """Generate JWT token with user information"""
    now = datetime.now(timezone.utc)
    payload = {
        'user_id': user_id,
        'role': role,
        'exp': now + current_app.config['JWT_ACCESS_TOKEN_EXPIRES'],
        'iat': now
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM']
    )


def decode_token(token: str) -> dict:
    """Decode and verify JWT token"""
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']]
        )
    except jwt.ExpiredSignatureError:
        raise ValueError('Token has expired')
    except jwt.InvalidTokenError:
        raise ValueError('Invalid token')


def require_auth(f):
    """Decorator to require authentication for routes.

    Resolves the bearer token to a User row and stores it on ``g.current_user``.
    The role is always read from the database, never trusted from the token.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return jsonify({'error': 'Missing authorization header', 'code': 'unauthenticated'}), 401

        try:
            # Extract token from "Bearer <token>"
            token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
            payload = decode_token(token)
        except (ValueError, IndexError) as e:
            return jsonify({'error': str(e), 'code': 'unauthenticated'}), 401

        user_id = payload.get('user_id')
        user = db.session.get(User, user_id) if user_id else None
        if user is None:
            return jsonify({'error': 'User no longer exists', 'code': 'unauthenticated'}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles):
    """Decorator to require specific role(s) for routes"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = g.get('current_user')
            if user is None:
                return jsonify({'error': 'Authentication required', 'code': 'unauthenticated'}), 401

            if user.role not in roles:
                return jsonify({'error': 'Insufficient permissions', 'code': 'unauthorized'}), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
