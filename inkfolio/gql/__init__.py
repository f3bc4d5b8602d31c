from ariadne import make_executable_schema

from inkfolio.gql import auth, posts, projects, resume, taxonomy, uploads
from inkfolio.gql.errors import format_error
from inkfolio.gql.scalars import datetime_scalar, file_upload_scalar
from inkfolio.gql.type_defs import type_defs

schema = make_executable_schema(
    type_defs,
    datetime_scalar,
    file_upload_scalar,
    *auth.bindables,
    *posts.bindables,
    *taxonomy.bindables,
    *projects.bindables,
    *resume.bindables,
    *uploads.bindables,
    convert_names_case=True,
)

__all__ = ['schema', 'format_error']
