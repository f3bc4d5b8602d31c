"""Categories and tags: the two post classifications, resolved the same way."""
from ariadne import MutationType, ObjectType, QueryType

from inkfolio.gql.context import admin_caller, get_repo, visible_posts

query = QueryType()
mutation = MutationType()
category_type = ObjectType('Category')
tag_type = ObjectType('Tag')


# --- Categories ---
@query.field('categories')
def resolve_categories(_, info):
    return get_repo(info).list_categories()


@query.field('category')
def resolve_category(_, info, id=None, slug=None):
    return get_repo(info).get_category(id=id, slug=slug)


@mutation.field('createCategory')
def resolve_create_category(_, info, input):
    admin_caller(info)
    return get_repo(info).create_category(input)


@mutation.field('updateCategory')
def resolve_update_category(_, info, id, input):
    admin_caller(info)
    return get_repo(info).update_category(id, input)


@mutation.field('deleteCategory')
def resolve_delete_category(_, info, id):
    admin_caller(info)
    return get_repo(info).delete_category(id)


@category_type.field('posts')
def resolve_category_posts(category, info):
    return visible_posts(info, category.posts)


@category_type.field('_count')
def resolve_category_count(category, info):
    # Live count per parent, no batching
    return {'posts': get_repo(info).count_category_posts(category.id)}


# --- Tags ---
@query.field('tags')
def resolve_tags(_, info):
    return get_repo(info).list_tags()


@query.field('tag')
def resolve_tag(_, info, id=None, slug=None):
    return get_repo(info).get_tag(id=id, slug=slug)


@mutation.field('createTag')
def resolve_create_tag(_, info, input):
    admin_caller(info)
    return get_repo(info).create_tag(input)


@mutation.field('updateTag')
def resolve_update_tag(_, info, id, input):
    admin_caller(info)
    return get_repo(info).update_tag(id, input)


@mutation.field('deleteTag')
def resolve_delete_tag(_, info, id):
    admin_caller(info)
    return get_repo(info).delete_tag(id)


@tag_type.field('posts')
def resolve_tag_posts(tag, info):
    return visible_posts(info, tag.posts)


@tag_type.field('_count')
def resolve_tag_count(tag, info):
    return {'posts': get_repo(info).count_tag_posts(tag.id)}


bindables = [query, mutation, category_type, tag_type]
