from flask import current_app, jsonify, request

from inkfolio.auth import current_caller, login_required
from inkfolio.errors import InvalidToken, Unauthorized, ValidationError
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import get_repository


def _token_response(user):
    pair = current_app.extensions['tokens'].issue_token_pair(user.id)
    return jsonify({
        'token': pair['token'],
        'refreshToken': pair['refresh_token'],
        'user': user.to_dict(),
    })


@api_bp.route('/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip()
    password = data.get('password') or ''
    if not email or not password:
        raise ValidationError('Email and password required')
    user = get_repository().authenticate(email, password)
    if user is None:
        raise Unauthorized('Invalid email or password')
    return _token_response(user)


@api_bp.route('/auth/refresh', methods=['POST'])
def refresh():
    data = request.get_json(silent=True) or {}
    user_id = current_app.extensions['tokens'].verify_refresh(data.get('refreshToken') or '')
    user = get_repository().get_user(user_id)
    if user is None:
        raise InvalidToken('Refresh token is invalid or expired')
    return _token_response(user)


@api_bp.route('/auth/verify', methods=['GET'])
@login_required
def verify():
    user = get_repository().get_user(current_caller().id)
    return jsonify(user.to_dict())
