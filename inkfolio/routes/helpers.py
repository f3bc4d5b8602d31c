from ariadne import convert_camel_case_to_snake
from flask import request

from inkfolio import db
from inkfolio.errors import ValidationError
from inkfolio.repository import ContentRepository


def get_repository():
    return ContentRepository(db.session)


def parse_bool(val):
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        return val.lower() == 'true'
    return False


def parse_int(val, default, minimum=0):
    if val in (None, ''):
        return default
    try:
        return max(minimum, int(val))
    except (TypeError, ValueError):
        raise ValidationError('Expected an integer, got %r' % val)


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Expected a JSON object body')
    return {convert_camel_case_to_snake(key): value for key, value in data.items()}


def parse_order(val):
    """Turn ``field:dir`` (e.g. ``createdAt:asc``) into ``{'created_at': 'asc'}``."""
    if not val:
        return None
    field, _, direction = val.partition(':')
    return {convert_camel_case_to_snake(field): direction or 'desc'}
