"""
JWT authentication decorators for the REST API.
"""
from functools import wraps
from datetime import datetime, timedelta, timezone

import jwt
from flask import request, jsonify, current_app

from app.extensions import db
from app.models.profile import Profile


def _jwt_secret():
    return current_app.config.get('JWT_SECRET_KEY') or current_app.config['SECRET_KEY']


def create_access_token(profile_id, expires_minutes=60):
    """Create a JWT access token."""
    payload = {
        'sub': str(profile_id),
        'type': 'access',
        'iat': datetime.now(timezone.utc),
        'exp': datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm='HS256')


def decode_token(token):
    """Decode and validate a JWT token. Returns payload or None."""
    try:
        return jwt.decode(token, _jwt_secret(), algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def _unauthorized(code, message):
    return jsonify({'error': {'code': code, 'message': message}}), 401


def get_current_api_user():
    """Extract the profile from the Authorization header. Returns (profile, error_response)."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None, _unauthorized('missing_token', 'Authorization header with Bearer token required.')

    payload = decode_token(auth_header[7:])  # Strip "Bearer "
    if payload is None:
        return None, _unauthorized('invalid_token', 'Token is invalid or expired.')

    if payload.get('type') != 'access':
        return None, _unauthorized('wrong_token_type', 'Access token required.')

    try:
        profile_id = int(payload['sub'])
    except (KeyError, ValueError, TypeError):
        return None, _unauthorized('invalid_token', 'Token contains invalid user ID.')

    profile = db.session.get(Profile, profile_id)
    if profile is None or not profile.is_active:
        return None, _unauthorized('user_not_found', 'User not found or deactivated.')

    return profile, None


def jwt_required(f):
    """Decorator: require valid JWT access token."""
    @wraps(f)
    def decorated(*args, **kwargs):
        profile, error = get_current_api_user()
        if error:
            return error
        request.api_user = profile
        return f(*args, **kwargs)
    return decorated
