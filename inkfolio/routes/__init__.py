from flask import Blueprint, g

api_bp = Blueprint('api', __name__)


@api_bp.before_request
def forget_caller():
    # g outlives the request when an app context is already pushed
    g.pop('caller', None)


from inkfolio.routes import auth, content, files, graphql_api, posts, stats, taxonomy  # noqa: E402,F401
