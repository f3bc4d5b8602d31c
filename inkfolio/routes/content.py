"""Public, read-only views over the exported content directory."""
from flask import current_app, jsonify, request

from inkfolio.content import filter_posts, paginate
from inkfolio.errors import NotFound
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import parse_int


def _loader():
    return current_app.extensions['content_loader']


def _found(item, label):
    if item is None:
        raise NotFound('%s not found' % label)
    return jsonify(item)


@api_bp.route('/resume', methods=['GET'])
def get_resume():
    return _found(_loader().get_resume(), 'Resume')


@api_bp.route('/projects/featured', methods=['GET'])
def get_featured_projects():
    return jsonify(_loader().get_featured_projects())


@api_bp.route('/projects/<slug>', methods=['GET'])
def get_project(slug):
    return _found(_loader().get_project_by_slug(slug), 'Project')


@api_bp.route('/content/posts', methods=['GET'])
def get_content_posts():
    args = request.args
    posts = filter_posts(_loader().get_all_posts(), search=args.get('search'),
                         category=args.get('category'), tag=args.get('tag'))
    return jsonify(paginate(posts, page=parse_int(args.get('page'), 1, minimum=1),
                            per_page=parse_int(args.get('perPage'), 10, minimum=1)))


@api_bp.route('/content/posts/<slug>', methods=['GET'])
def get_content_post(slug):
    return _found(_loader().get_post_by_slug(slug), 'Post')


@api_bp.route('/content/projects', methods=['GET'])
def get_content_projects():
    return jsonify(_loader().get_all_projects())


@api_bp.route('/content/categories', methods=['GET'])
def get_content_categories():
    return jsonify(_loader().get_all_categories())


@api_bp.route('/content/tags', methods=['GET'])
def get_content_tags():
    return jsonify(_loader().get_all_tags())
