from collections import namedtuple
from datetime import datetime, timedelta
from functools import wraps

import jwt
from flask import current_app, g, request

from inkfolio import db
from inkfolio.errors import Forbidden, InvalidToken, Unauthorized
from inkfolio.models import ROLE_ADMIN

CallerIdentity = namedtuple('CallerIdentity', ['id', 'email', 'role'])

ACCESS = 'access'
REFRESH = 'refresh'


class TokenService:
    """Signs and verifies the access/refresh JWT pair. Stateless: expiry is the only revocation."""

    algorithm = 'HS256'

    def __init__(self, access_secret, refresh_secret,
                 access_ttl=timedelta(days=7), refresh_ttl=timedelta(days=30)):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_config(cls, config):
        return cls(
            config['JWT_SECRET'],
            config['JWT_REFRESH_SECRET'],
            access_ttl=config.get('ACCESS_TOKEN_TTL', timedelta(days=7)),
            refresh_ttl=config.get('REFRESH_TOKEN_TTL', timedelta(days=30)),
        )

    def _encode(self, user_id, token_type, secret, ttl):
        now = datetime.utcnow()
        payload = {
            'user_id': user_id,
            'type': token_type,
            'iat': now,
            'exp': now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token, token_type, secret):
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken('Token has expired') from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken('Invalid token') from exc
        if payload.get('type') != token_type or not payload.get('user_id'):
            raise InvalidToken('Invalid token')
        return payload['user_id']

    def issue_token_pair(self, user_id):
        return {
            'token': self._encode(user_id, ACCESS, self.access_secret, self.access_ttl),
            'refresh_token': self._encode(user_id, REFRESH, self.refresh_secret, self.refresh_ttl),
        }

    def verify_access(self, token):
        return self._decode(token, ACCESS, self.access_secret)

    def verify_refresh(self, token):
        return self._decode(token, REFRESH, self.refresh_secret)


def bearer_token(headers):
    auth_header = headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    return auth_header[len('Bearer '):].strip() or None


def resolve_caller(headers, tokens, repo):
    """Return the caller behind the bearer token, or None for anonymous requests.

    Never raises: a missing header, a bad signature and a deleted user all
    degrade to an anonymous caller so public queries keep working.
    """
    token = bearer_token(headers)
    if token is None:
        return None
    try:
        user_id = tokens.verify_access(token)
    except InvalidToken as exc:
        current_app.logger.debug('Token verification failed: %s', exc)
        return None
    user = repo.get_user(user_id)
    if user is None:
        current_app.logger.debug('Token refers to missing user %s', user_id)
        return None
    return CallerIdentity(user.id, user.email, user.role)


def require_authenticated(caller):
    if caller is None:
        raise Unauthorized()
    return caller


def require_admin(caller):
    caller = require_authenticated(caller)
    if caller.role != ROLE_ADMIN:
        raise Forbidden()
    return caller


def is_admin(caller):
    return caller is not None and caller.role == ROLE_ADMIN


def scope_to_published(caller, filter):
    """Non-admin callers only see published rows; asking for drafts needs an admin."""
    filter = dict(filter or {})
    if is_admin(caller):
        return filter
    if filter.get('published') is False:
        require_admin(caller)
    filter['published'] = True
    return filter


# --- Flask glue ---
def current_caller():
    if 'caller' not in g:
        from inkfolio.repository import ContentRepository
        g.caller = resolve_caller(request.headers, current_app.extensions['tokens'],
                                  ContentRepository(db.session))
    return g.caller


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        require_authenticated(current_caller())
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        require_admin(current_caller())
        return f(*args, **kwargs)
    return decorated
