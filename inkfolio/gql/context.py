from inkfolio.auth import is_admin, require_admin, scope_to_published

MAX_TAKE = 100


def get_repo(info):
    return info.context['repo']


def get_caller(info):
    return info.context.get('caller')


def admin_caller(info):
    return require_admin(get_caller(info))


def page_size(take, default):
    if take is None:
        return default
    return max(0, min(take, MAX_TAKE))


def visible_filter(info, filter):
    return scope_to_published(get_caller(info), filter)


def visible_posts(info, posts):
    if is_admin(get_caller(info)):
        return list(posts)
    return [post for post in posts if post.published]
