from ariadne import MutationType, ObjectType, QueryType

from inkfolio.auth import is_admin
from inkfolio.gql.context import admin_caller, get_caller, get_repo, page_size, visible_filter

query = QueryType()
mutation = MutationType()
project_type = ObjectType('Project')


@query.field('projects')
def resolve_projects(_, info, filter=None, skip=0, take=None, order_by=None):
    return get_repo(info).list_projects(
        visible_filter(info, filter),
        skip=skip or 0,
        take=page_size(take, 10),
        order_by=order_by,
    )


@query.field('project')
def resolve_project(_, info, id=None, slug=None):
    project = get_repo(info).get_project(id=id, slug=slug)
    if project is not None and not project.published and not is_admin(get_caller(info)):
        return None
    return project


@query.field('projectsCount')
def resolve_projects_count(_, info, filter=None):
    return get_repo(info).count_projects(visible_filter(info, filter))


@mutation.field('createProject')
def resolve_create_project(_, info, input):
    admin_caller(info)
    return get_repo(info).create_project(input)


@mutation.field('updateProject')
def resolve_update_project(_, info, id, input):
    admin_caller(info)
    return get_repo(info).update_project(id, input)


@mutation.field('deleteProject')
def resolve_delete_project(_, info, id):
    admin_caller(info)
    return get_repo(info).delete_project(id)


@project_type.field('technologies')
def resolve_technologies(project, info):
    return project.technology_list


bindables = [query, mutation, project_type]
