from ariadne import MutationType, ObjectType, QueryType

from inkfolio.errors import InvalidToken, Unauthorized
from inkfolio.gql.context import get_caller, get_repo, visible_posts

query = QueryType()
mutation = MutationType()
user_type = ObjectType('User')


def _auth_payload(tokens, user):
    pair = tokens.issue_token_pair(user.id)
    return {'token': pair['token'], 'refresh_token': pair['refresh_token'], 'user': user}


@query.field('me')
def resolve_me(_, info):
    caller = get_caller(info)
    if caller is None:
        return None
    return get_repo(info).get_user(caller.id)


@mutation.field('login')
def resolve_login(_, info, email, password):
    user = get_repo(info).authenticate(email, password)
    if user is None:
        raise Unauthorized('Invalid email or password')
    return _auth_payload(info.context['tokens'], user)


@mutation.field('refreshToken')
def resolve_refresh_token(_, info, refresh_token):
    tokens = info.context['tokens']
    user_id = tokens.verify_refresh(refresh_token)
    user = get_repo(info).get_user(user_id)
    if user is None:
        raise InvalidToken('Refresh token is invalid or expired')
    return _auth_payload(tokens, user)


@user_type.field('posts')
def resolve_user_posts(user, info):
    return visible_posts(info, user.posts)


bindables = [query, mutation, user_type]
