from flask import jsonify, request

from inkfolio.auth import admin_required, current_caller, is_admin, scope_to_published
from inkfolio.errors import NotFound
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import get_repository, json_body, parse_bool, parse_int, parse_order


# --- Post CRUD ---
@api_bp.route('/posts', methods=['GET'])
def get_posts():
    args = request.args
    filter = {'search': args.get('search'), 'category_id': args.get('categoryId')}
    if args.get('published') is not None:
        filter['published'] = parse_bool(args.get('published'))
    if args.get('tagIds'):
        filter['tag_ids'] = [tag_id for tag_id in args['tagIds'].split(',') if tag_id]
    filter = scope_to_published(current_caller(), filter)

    skip = parse_int(args.get('skip'), 0)
    take = min(parse_int(args.get('take'), 10), 100)
    repo = get_repository()
    posts = repo.list_posts(filter, skip=skip, take=take, order_by=parse_order(args.get('orderBy')))
    return jsonify({
        'posts': [p.to_dict() for p in posts],
        'total': repo.count_posts(filter),
        'skip': skip,
        'take': take,
    })


@api_bp.route('/posts/<post_id>', methods=['GET'])
def get_post(post_id):
    slug = request.args.get('slug')
    post = get_repository().get_post(id=None if slug else post_id, slug=slug)
    if post is None or (not post.published and not is_admin(current_caller())):
        raise NotFound('Post not found')
    return jsonify(post.to_dict())


@api_bp.route('/posts', methods=['POST'])
@admin_required
def create_post():
    post = get_repository().create_post(current_caller().id, json_body())
    return jsonify(post.to_dict()), 201


@api_bp.route('/posts/<post_id>', methods=['PUT'])
@admin_required
def update_post(post_id):
    post = get_repository().update_post(post_id, json_body())
    return jsonify(post.to_dict())


@api_bp.route('/posts/<post_id>', methods=['DELETE'])
@admin_required
def delete_post(post_id):
    get_repository().delete_post(post_id)
    return jsonify({'success': True})
