from flask import jsonify, request

from inkfolio.auth import admin_required
from inkfolio.errors import NotFound
from inkfolio.routes import api_bp
from inkfolio.routes.helpers import get_repository, json_body


def _detail(entity, published_posts, count):
    data = entity.to_dict(post_count=count)
    posts = sorted((p for p in published_posts if p.published),
                   key=lambda p: p.published_at or p.created_at, reverse=True)
    data['posts'] = [p.to_dict() for p in posts]
    return data


# --- Categories ---
@api_bp.route('/categories', methods=['GET'])
def get_categories():
    repo = get_repository()
    return jsonify([c.to_dict(post_count=repo.count_category_posts(c.id))
                    for c in repo.list_categories(newest_first=True)])


@api_bp.route('/categories', methods=['POST'])
@admin_required
def create_category():
    category = get_repository().create_category(json_body())
    return jsonify(category.to_dict(post_count=0)), 201


@api_bp.route('/categories/<category_id>', methods=['GET'])
def get_category(category_id):
    repo = get_repository()
    slug = request.args.get('slug')
    category = repo.get_category(id=None if slug else category_id, slug=slug)
    if category is None:
        raise NotFound('Category not found')
    return jsonify(_detail(category, category.posts, repo.count_category_posts(category.id)))


@api_bp.route('/categories/<category_id>', methods=['PUT'])
@admin_required
def update_category(category_id):
    repo = get_repository()
    category = repo.update_category(category_id, json_body())
    return jsonify(category.to_dict(post_count=repo.count_category_posts(category.id)))


@api_bp.route('/categories/<category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    get_repository().delete_category(category_id)
    return jsonify({'success': True})


# --- Tags ---
@api_bp.route('/tags', methods=['GET'])
def get_tags():
    repo = get_repository()
    return jsonify([t.to_dict(post_count=repo.count_tag_posts(t.id))
                    for t in repo.list_tags(newest_first=True)])


@api_bp.route('/tags', methods=['POST'])
@admin_required
def create_tag():
    tag = get_repository().create_tag(json_body())
    return jsonify(tag.to_dict(post_count=0)), 201


@api_bp.route('/tags/<tag_id>', methods=['GET'])
def get_tag(tag_id):
    repo = get_repository()
    slug = request.args.get('slug')
    tag = repo.get_tag(id=None if slug else tag_id, slug=slug)
    if tag is None:
        raise NotFound('Tag not found')
    return jsonify(_detail(tag, tag.posts, repo.count_tag_posts(tag.id)))


@api_bp.route('/tags/<tag_id>', methods=['PUT'])
@admin_required
def update_tag(tag_id):
    repo = get_repository()
    tag = repo.update_tag(tag_id, json_body())
    return jsonify(tag.to_dict(post_count=repo.count_tag_posts(tag.id)))


@api_bp.route('/tags/<tag_id>', methods=['DELETE'])
@admin_required
def delete_tag(tag_id):
    get_repository().delete_tag(tag_id)
    return jsonify({'success': True})
