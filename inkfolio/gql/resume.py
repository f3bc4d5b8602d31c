from ariadne import MutationType, QueryType

from inkfolio.gql.context import admin_caller, get_repo, page_size

query = QueryType()
mutation = MutationType()


@query.field('resume')
def resolve_resume(_, info):
    return get_repo(info).latest_resume()


@query.field('resumes')
def resolve_resumes(_, info, skip=0, take=None):
    admin_caller(info)
    return get_repo(info).list_resumes(skip=skip or 0, take=page_size(take, 10))


@mutation.field('createResume')
def resolve_create_resume(_, info, input):
    admin_caller(info)
    return get_repo(info).create_resume(input)


@mutation.field('updateResume')
def resolve_update_resume(_, info, data):
    admin_caller(info)
    return get_repo(info).upsert_resume(data)


@mutation.field('deleteResume')
def resolve_delete_resume(_, info, id):
    admin_caller(info)
    return get_repo(info).delete_resume(id)


bindables = [query, mutation]
