from ariadne import MutationType, QueryType

from inkfolio.auth import is_admin
from inkfolio.gql.context import admin_caller, get_caller, get_repo, page_size, visible_filter

query = QueryType()
mutation = MutationType()


@query.field('posts')
def resolve_posts(_, info, filter=None, skip=0, take=None, order_by=None):
    return get_repo(info).list_posts(
        visible_filter(info, filter),
        skip=skip or 0,
        take=page_size(take, 10),
        order_by=order_by,
    )


@query.field('post')
def resolve_post(_, info, id=None, slug=None):
    post = get_repo(info).get_post(id=id, slug=slug)
    if post is not None and not post.published and not is_admin(get_caller(info)):
        return None
    return post


@query.field('postsCount')
def resolve_posts_count(_, info, filter=None):
    return get_repo(info).count_posts(visible_filter(info, filter))


@mutation.field('createPost')
def resolve_create_post(_, info, input):
    caller = admin_caller(info)
    return get_repo(info).create_post(caller.id, input)


@mutation.field('updatePost')
def resolve_update_post(_, info, id, input):
    admin_caller(info)
    return get_repo(info).update_post(id, input)


@mutation.field('deletePost')
def resolve_delete_post(_, info, id):
    admin_caller(info)
    return get_repo(info).delete_post(id)


bindables = [query, mutation]
