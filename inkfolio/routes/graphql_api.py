import json

from ariadne import combine_multipart_data, graphql_sync
from ariadne.exceptions import HttpBadRequestError
from ariadne.explorer import ExplorerGraphiQL
from flask import current_app, jsonify, request
from graphql import GraphQLError, OperationType
from graphql.validation import ValidationRule

from inkfolio.auth import current_caller
from inkfolio.errors import ValidationError
from inkfolio.gql import format_error, schema
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import get_repository

explorer_html = ExplorerGraphiQL(title='Inkfolio GraphQL').html(None)


class QueryOnlyRule(ValidationRule):
    """Reject mutations sent over GET."""

    def enter_operation_definition(self, node, *_args):
        if node.operation != OperationType.QUERY:
            self.report_error(GraphQLError(
                'Only query operations are allowed over GET', node))


def graphql_context():
    return {
        'request': request,
        'repo': get_repository(),
        'tokens': current_app.extensions['tokens'],
        'storage': current_app.extensions['blob_storage'],
        'config': current_app.config,
        'caller': current_caller(),
    }


def _load_json(raw, label):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError('%s must be valid JSON' % label)


def _execute(data, validation_rules=None):
    success, result = graphql_sync(
        schema,
        data,
        context_value=graphql_context(),
        debug=current_app.debug,
        error_formatter=format_error,
        validation_rules=validation_rules,
    )
    return jsonify(result), 200 if success else 400


@api_bp.route('/graphql', methods=['GET'])
def graphql_explorer():
    if 'query' not in request.args:
        return explorer_html, 200
    data = {
        'query': request.args['query'],
        'variables': _load_json(request.args.get('variables'), 'variables'),
        'operationName': request.args.get('operationName'),
    }
    return _execute(data, validation_rules=[QueryOnlyRule])


@api_bp.route('/graphql', methods=['POST'])
def graphql_server():
    if request.mimetype == 'multipart/form-data':
        operations = _load_json(request.form.get('operations'), 'operations')
        files_map = _load_json(request.form.get('map'), 'map')
        if operations is None or files_map is None:
            raise ValidationError('Multipart requests need operations and map fields')
        try:
            data = combine_multipart_data(operations, files_map, request.files)
        except HttpBadRequestError as exc:
            raise ValidationError(exc.message or 'Invalid multipart request')
    else:
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError('Expected a JSON body')
    return _execute(data)
