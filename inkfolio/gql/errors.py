from ariadne import format_error as default_format_error
from ariadne.utils import unwrap_graphql_error
from flask import current_app
from graphql import GraphQLError

from inkfolio.errors import ContentError


def format_error(error, debug=False):
    """Attach a stable ``extensions.code``; hide unexpected failures outside debug."""
    formatted = default_format_error(error, debug)
    original = unwrap_graphql_error(error)
    extensions = formatted.setdefault('extensions', {})
    if isinstance(original, ContentError):
        formatted['message'] = original.message
        extensions['code'] = original.code
    elif original is not None and not isinstance(original, GraphQLError):
        current_app.logger.error('GraphQL resolver failed: %s', original, exc_info=original)
        if not debug:
            formatted['message'] = 'Internal server error'
        extensions['code'] = 'INTERNAL'
    if not extensions:
        del formatted['extensions']
    return formatted
