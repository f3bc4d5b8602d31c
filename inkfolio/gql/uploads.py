from ariadne import MutationType, QueryType

from inkfolio.errors import NotFound
from inkfolio.gql.context import admin_caller, get_repo, page_size
from inkfolio.uploads import delete_uploads, store_upload

query = QueryType()
mutation = MutationType()


@query.field('uploads')
def resolve_uploads(_, info, skip=0, take=None, folder=None, order_by=None):
    admin_caller(info)
    return get_repo(info).list_uploads(
        skip=skip or 0,
        take=page_size(take, 20),
        order_by=order_by,
        folder=folder,
    )


@query.field('upload')
def resolve_upload(_, info, id):
    admin_caller(info)
    return get_repo(info).get_upload(id)


@mutation.field('uploadFile')
def resolve_upload_file(_, info, file, folder=None):
    caller = admin_caller(info)
    config = info.context['config']
    return store_upload(
        get_repo(info), info.context['storage'], file, caller.id, folder,
        allowed_types=config['ALLOWED_UPLOAD_TYPES'],
        max_size=config['MAX_UPLOAD_SIZE'],
    )


@mutation.field('deleteUpload')
def resolve_delete_upload(_, info, id):
    admin_caller(info)
    repo = get_repo(info)
    upload = repo.get_upload(id)
    if upload is None:
        raise NotFound('File not found')
    delete_uploads(repo, info.context['storage'], [upload])
    return True


bindables = [query, mutation]
